"""Reusable multi-step flows built from the page objects.

SharedSteps owns the SessionContext of one browser session. The context is
replaced only after the UI has confirmed a change (company label updated,
stack toggle flipped, login landed), and every replacement is mirrored to
Sentry so failures carry the tenant and stack they happened on.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from config import sop_config
from src.pages.alerts_dashboard_page import AlertsDashboardPage
from src.pages.app_interactions_page import AppInteractionsPage
from src.pages.dispatch_reports_page import DispatchReportsPage
from src.pages.incident_reports_page import IncidentReportsPage
from src.pages.login_page import LoginPage
from src.pages.menu_page import MenuPage
from src.pages.sites_page import SitesPage
from src.pages.sop_page import SopPage
from src.shared.constants import REPORTS, RETRY
from src.shared.errors import WorkflowError
from src.shared.retry import retry_until, try_cleanup
from src.shared.sentry_integration import add_breadcrumb, set_session_context
from src.shared.session import AlertFixture, AlertState, SessionContext, Stack
from src.shared.settings import Credentials
from src.steps.workflow_helper import WorkflowHelper

logger = logging.getLogger(__name__)

MANUAL_ALERT = 'Manual Alert'


class SharedSteps:
    """Facade over the page objects for one Playwright page.

    Args:
        page: Playwright page
        base_url: Application URL; the context's base_url is used when None
        environment_config: Parsed config/environments.yaml (companies, sites, stations)
    """

    def __init__(self, page, base_url: Optional[str] = None,
                 environment_config: Optional[Dict[str, Any]] = None):
        self.page = page
        self.environment_config = environment_config or {}
        self.login_page = LoginPage(page, base_url)
        self.app = AppInteractionsPage(page)
        self.menu = MenuPage(page)
        self.sites = SitesPage(page)
        self.dashboard = AlertsDashboardPage(page)
        self.sop = SopPage(page)
        self.dispatch_reports = DispatchReportsPage(page)
        self.incident_reports = IncidentReportsPage(page)
        self.workflow = WorkflowHelper(page)
        self.context = SessionContext()

    def _set_context(self, context: SessionContext) -> None:
        self.context = context
        set_session_context(context.company, context.stack.value, context.user)

    def _configured(self, section: str, key: str, default: Optional[str] = None) -> Optional[str]:
        return (self.environment_config.get(section) or {}).get(key, default)

    # Session

    def authenticate(self, credentials: Credentials, company: Optional[str] = None) -> SessionContext:
        """Sign in and optionally select a company."""
        self.login_page.login(credentials)
        self._set_context(self.context.with_user(credentials.username))
        add_breadcrumb(f"logged in as {credentials.username}", category="session")
        if company:
            self.select_company(company)
        return self.context

    def switch_user(self, credentials: Credentials, company: Optional[str] = None) -> SessionContext:
        """Sign out whoever is signed in and sign in with credentials.

        Sign-out clears the company selection; the context starts over
        from the new user.
        """
        if self.context.user == credentials.username:
            logger.info(f"Already signed in as {credentials.username}")
            if company:
                self.select_company(company)
            return self.context
        self.login_page.goto()
        if self.login_page.is_logged_in():
            self.login_page.logout(self.context.user)
        self._set_context(SessionContext())
        add_breadcrumb(f"signed out, switching to {credentials.username}", category="session")
        return self.authenticate(credentials, company)

    def select_company(self, name: str, force: bool = False) -> SessionContext:
        """Make name the active company.

        Without force the current label is read first and a matching company
        is left alone.
        """
        if not force and self.app.get_selected_company() == name:
            logger.info(f"Company '{name}' already selected")
        else:
            self.app.select_company(name)
            vodacom = self._configured('companies', 'vodacom', 'Vodacom')
            if name == vodacom:
                station = self._configured('stations', 'vodacom_default', 'South Africa Whole')
                try_cleanup(self.app.select_default_station_option, "Vodacom default station", station)
        self._set_context(self.context.with_company(name))
        add_breadcrumb(f"company {name}", category="session")
        return self.context

    def _switch_stack(self, stack: Stack) -> SessionContext:
        self.app.switch_stack(stack)
        self._set_context(self.context.with_stack(stack))
        return self.context

    def switch_to_incident_stack(self) -> SessionContext:
        return self._switch_stack(Stack.INCIDENT)

    def switch_to_situation_stack(self) -> SessionContext:
        return self._switch_stack(Stack.SITUATION)

    def change_station(self, name: str) -> None:
        self.app.select_station(name)
        add_breadcrumb(f"station {name}", category="session")

    # Navigation

    def go_to_command(self) -> None:
        self.menu.navigate_to('Command')
        self.dashboard.settle()

    def go_to_sites(self) -> None:
        self.menu.navigate_to('Sites')

    def go_to_configuration(self, submenu: str) -> None:
        self.menu.navigate_to_configuration(submenu)

    def go_to_dispatch_reports(self) -> None:
        self.menu.navigate_to_dispatch_reports()

    def go_to_incident_reports(self) -> None:
        self.menu.navigate_to_alert_reports()

    # Alerts

    def create_manual_alert(self, site: str) -> AlertFixture:
        """Create a manual alert from the Sites screen and return to the dashboard."""
        self.go_to_sites()
        self.sites.create_manual_alert(site)
        add_breadcrumb(f"manual alert created for {site}", category="seeding")
        self.go_to_command()
        return AlertFixture(site=site, alert_type=MANUAL_ALERT)

    def wait_for_site_card(self, site: str, attempts: int = RETRY.CARD_ATTEMPTS,
                           interval: float = RETRY.CARD_INTERVAL) -> bool:
        return self.dashboard.wait_for_site_card(site, attempts, interval)

    def apply_manual_alert_filter(self) -> None:
        self.dashboard.reset_filter()
        self.dashboard.filter_by_manual_alert()

    def apply_ub_and_trex_filter(self, site: str) -> bool:
        self.dashboard.reset_filter()
        return self.dashboard.filter_by_ub_and_trex(site)

    def reset_stack_filter(self) -> None:
        self.dashboard.reset_filter()

    def verify_trex_filter_checked(self, attempts: int = RETRY.FILTER_VERIFY_ATTEMPTS,
                                   interval: float = RETRY.FILTER_VERIFY_INTERVAL) -> bool:
        """Poll the stack filter until the Trex checkbox reads as checked.

        Raises:
            RetryExhaustedError: If it never does
        """
        def _checked() -> bool:
            self.dashboard.verify_filter_checked('Trex')
            return True

        return retry_until(_checked, attempts, interval, sleep=self.dashboard.sleep,
                           description="Trex filter checked", exceptions=(WorkflowError,))

    def select_alert(self, alert: AlertFixture) -> str:
        """Open the alert's card on the current stack."""
        if alert.alert_type == MANUAL_ALERT:
            self.dashboard.select_manual_alert_card(alert.site)
            return MANUAL_ALERT
        return self.dashboard.select_ub_or_trex_card(alert.site)

    def complete_sop(self, alert: AlertFixture, answer: str = sop_config.DEFAULT_ANSWER) -> AlertFixture:
        self.sop.complete_sop(answer)
        return alert.with_sop_complete()

    def escalate(self, alert: AlertFixture) -> AlertFixture:
        """Escalate to the Situation stack.

        Raises:
            InvalidTransitionError: If the alert cannot be escalated from its state
            WorkflowError: If the alert did not leave the Incident stack
        """
        escalated = alert.transition(AlertState.ESCALATED)
        if not self.sop.escalate(alert.site):
            raise WorkflowError(f"{alert.alert_type} at {alert.site} did not leave the Incident stack "
                                f"after escalating")
        add_breadcrumb(f"escalated {alert.alert_type} at {alert.site}")
        return escalated

    def dispatch(self, alert: AlertFixture) -> AlertFixture:
        """Dispatch a responder; the alert moves to the Situation stack like an escalation."""
        dispatched = alert.transition(AlertState.ESCALATED)
        self.sop.dispatch()
        add_breadcrumb(f"dispatched {alert.alert_type} at {alert.site}")
        return dispatched

    def dismiss(self, alert: AlertFixture) -> AlertFixture:
        dismissed = alert.transition(AlertState.DISMISSED)
        self.sop.dismiss()
        add_breadcrumb(f"dismissed {alert.alert_type} at {alert.site}")
        return dismissed

    def flag(self, alert: AlertFixture) -> AlertFixture:
        """Flag the selected alert.

        Raises:
            InvalidTransitionError: If the alert already left the active stacks
            WorkflowError: If the card does not show as flagged
        """
        flagged = alert.with_flag(True)
        if not self.dashboard.flag_selected_alert():
            raise WorkflowError(f"{alert.alert_type} at {alert.site} not shown as flagged")
        add_breadcrumb(f"flagged {alert.alert_type} at {alert.site}")
        return flagged

    def unflag(self, alert: AlertFixture) -> AlertFixture:
        unflagged = alert.with_flag(False)
        if not self.dashboard.unflag_selected_alert():
            raise WorkflowError(f"{alert.alert_type} at {alert.site} still shown as flagged")
        return unflagged

    def set_alert_order(self, order: str) -> None:
        """Order incidents and the alerts within them ('Newest to Oldest' or 'Oldest to Newest')."""
        self.dashboard.apply_alert_order(order)
        add_breadcrumb(f"alert order {order}", category="session")

    # Reports

    def create_today_dispatch_report(self, name: str, file_format: str = 'xlsx',
                                     station: Optional[str] = None) -> str:
        self.go_to_dispatch_reports()
        self.dispatch_reports.create_report(name, file_format=file_format, station=station)
        return name

    def download_dispatch_report(self, name: str, extension: str = '.xlsx',
                                 dest_dir: Union[str, Path] = REPORTS.DOWNLOAD_DIR) -> Path:
        return self.dispatch_reports.download_report(name, extension, dest_dir)

    def archive_dispatch_report(self, name: str) -> bool:
        return try_cleanup(self.dispatch_reports.archive_report, f"archive report {name}", name)

    # Cleanup

    def cleanup_manual_alerts(self, site: Optional[str] = None) -> bool:
        site = site or self._configured('sites', 'manual_alert')
        return try_cleanup(self.workflow.manual_alert_cleanup, "manual alert cleanup", site)

    def cleanup_ub_and_trex(self, site: str) -> bool:
        return try_cleanup(self.workflow.ub_and_trex_cleanup, f"UB/Trex cleanup for {site}", site)
