"""Role management: create a role with or without stack filter editing, and remove it."""

import re

from config import management_config as sel
from src.pages.management_table_page import ManagementTablePage
from src.shared.constants import TIMEOUTS
from src.shared.errors import WorkflowError


class RoleManagementPage(ManagementTablePage):

    def create_role(self, name: str, description: str, can_edit_stack_filters: bool = True) -> None:
        """Create a role holding every permission; stack filter editing follows the flag."""
        self.log(f"creating role '{name}' (edit stack filters: {can_edit_stack_filters})")
        self.page.get_by_role("button", name=re.compile(sel.CREATE_NEW_BUTTON_PATTERN, re.IGNORECASE)).click()
        name_field = self.page.locator(sel.ROLE_NAME_INPUT)
        name_field.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        name_field.fill(name)
        self.page.locator(sel.ROLE_DESCRIPTION_INPUT).fill(description)

        select_all = self.page.locator(sel.ROLE_SELECT_ALL_BUTTON)
        for i in range(select_all.count()):
            select_all.nth(i).click()
            self.wait(0.5)

        radios = self.page.locator(sel.ROLE_EDIT_STACK_FILTERS_RADIO)
        (radios.first if can_edit_stack_filters else radios.nth(1)).click()
        self.page.get_by_role("button", name=sel.ROLE_SAVE_BUTTON_NAME).click()
        self.settle()

    def remove_role(self, name: str) -> None:
        """Delete the role, or archive it where deleting is not offered.

        Raises:
            WorkflowError: If neither action or no confirmation is offered
        """
        self.log(f"removing role '{name}'")
        self.search(name)
        for template in sel.ROLE_REMOVE_BUTTONS:
            button = self.page.locator(template.format(name=name)).first
            if self.is_visible(button, timeout=TIMEOUTS.QUICK_MS):
                button.click()
                break
        else:
            raise WorkflowError(f"No delete or archive action for role '{name}'")
        if not self.confirm():
            raise WorkflowError(f"No confirmation offered when removing role '{name}'")
