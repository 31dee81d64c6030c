"""Page objects, one per Proof360 screen"""

from .base_page import BasePage
from .login_page import LoginPage
from .app_interactions_page import AppInteractionsPage
from .menu_page import MenuPage
from .sites_page import SitesPage
from .alerts_dashboard_page import AlertsDashboardPage
from .sop_page import SopPage
from .dispatch_reports_page import DispatchReportsPage
from .incident_reports_page import DownloadedReport, IncidentReportsPage, unique_report_name
from .area_management_page import AreaManagementPage
from .company_management_page import CompanyManagementPage
from .management_table_page import ManagementTablePage
from .station_management_page import StationManagementPage
from .user_management_page import UserManagementPage
from .role_management_page import RoleManagementPage

__all__ = [
    'AlertsDashboardPage',
    'AppInteractionsPage',
    'AreaManagementPage',
    'BasePage',
    'CompanyManagementPage',
    'DispatchReportsPage',
    'DownloadedReport',
    'IncidentReportsPage',
    'LoginPage',
    'ManagementTablePage',
    'MenuPage',
    'RoleManagementPage',
    'SitesPage',
    'SopPage',
    'StationManagementPage',
    'UserManagementPage',
    'unique_report_name',
]
