"""Selectors for the side navigation menu"""

BURGER_BUTTON = '[data-test-id="burger-menu-button"]'
SIDENAV = 'div.sidenav'
SIDENAV_HIDDEN_CLASS = 'hide'

# Top-level menu entries -> data-test-id
MENU_ITEMS = {
    'Command': 'command',
    'History': 'history',
    'View': 'proof-view',
    'Sites': 'sites',
    'Metrics': 'metrics',
    'Reports': 'sidebaritem-reports',
    'Configurations': 'configurations',
}

# Configurations submenu -> data-test-id
CONFIGURATION_ITEMS = {
    'User Management': 'user-management',
    'Role Management': 'role-management',
    'Area Management': 'area-management',
    'Company Management': 'company-management',
    'Filter Management': 'filter-management',
    'Standard Operating Procedures': 'standard-operating-procedures-management',
    'Station Management': 'station-management',
    'Suppression Management': 'suppression-management',
    'Telegram Management': 'telegram-management',
    'VOI Management': 'voi-management-voi',
    'Wallboard Management': 'wallboard-management',
}

# Reports submenu -> selector; Dispatch Reports has no test id
REPORT_ITEMS = {
    'Audit Log': '[data-test-id="sidebaritem-audit-log"]',
    'Alert Reports': '[data-test-id="sidebaritem-alert-reports"]',
    'Alert Reports Schedules': '[data-test-id="sidebaritem-alert-reports-schedules"]',
    'Dispatch Reports': 'text=Dispatch Reports',
}

# Tabs that lead to the dispatch reports list from Alert Reports
DISPATCH_TAB_SELECTORS = (
    'text=Dispatch Reports',
    '[data-test-id*="dispatch"]',
    'a:has-text("Dispatch Reports")',
    'button:has-text("Dispatch Reports")',
    '[href*="dispatch"]',
)
