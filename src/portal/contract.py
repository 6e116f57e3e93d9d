"""FieldOps inspection portal UI contract.

This module contains ALL portal-specific locators:
- Routes for the auth page
- Role + accessible-name pairs for every control the workflow touches
- Status markers and dialog close controls

The portal owns these labels. When the portal UI changes, update this
module and bump PORTAL_UI_VERSION; nothing else should hard-code a label.
"""

from typing import Dict, Tuple

from playwright.async_api import Locator, Page


PORTAL_UI_VERSION = "2025.1"

AUTH_ROUTE = "/#/auth"


# =============================================================================
# ROLE-BASED CONTROLS (role, accessible name)
# =============================================================================

LOGIN_CONTROLS: Dict[str, Tuple[str, str]] = {
    "email": ("textbox", "Email"),
    "password": ("textbox", "Password"),
    "remember_me": ("checkbox", "Remember Me"),
    "log_in": ("button", "Log In"),
}

NAVIGATION_CONTROLS: Dict[str, Tuple[str, str]] = {
    "menu": ("button", "Navigation Menu"),
}

SEARCH_CONTROLS: Dict[str, Tuple[str, str]] = {
    "search": ("textbox", "Search by Name or Address"),
    "actions": ("button", "Actions"),
    "review": ("menuitem", "Review"),
}

REVIEW_CONTROLS: Dict[str, Tuple[str, str]] = {
    "bow_number": ("textbox", "Bow Number Detected Bow"),
    "approve": ("button", "Approve"),
    "reject": ("button", "Reject"),
    "reason_code": ("combobox", "Select Reason Code"),
    "reason_text": ("textbox", "Reason"),
    "save": ("button", "Save"),
}


# =============================================================================
# TEXT AND STRUCTURAL SELECTORS
# =============================================================================

TEAM_INSPECTIONS_TEXT = "Team Inspections"
LOGIN_FIELD_WRAPPER_SELECTOR = ".mat-mdc-form-field-infix"
SEARCH_RESULT_SELECTOR = ".name-wrapper"
REVIEW_FORM_SELECTOR = "#bownumberInput, .field"
APPROVE_DIALOG_CLOSE_XPATH = "//mat-icon[@id='reset_search_icon']"
REJECT_DIALOG_CLOSE_TEXT = "close"

STATUS_MARKER_XPATHS = {
    "rejected": "//span[normalize-space()='REJECTED']",
    "completed": "//span[normalize-space()='COMPLETED']",
}


def control(page: Page, controls: Dict[str, Tuple[str, str]], key: str) -> Locator:
    """
    Resolve a named control from one of the control tables

    Args:
        page: Playwright page object
        controls: One of the *_CONTROLS tables
        key: Control key within the table

    Returns:
        Locator found by ARIA role and accessible name
    """
    role, name = controls[key]
    return page.get_by_role(role, name=name)


def auth_url(portal_url: str) -> str:
    """Build the login page URL from the portal base URL"""
    return portal_url.rstrip("/") + AUTH_ROUTE
