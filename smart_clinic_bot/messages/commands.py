"""Menu intents and button actions referenced from keyboard templates."""

from enum import Enum


class MenuCommand(str, Enum):
    """Main menu intent, decoupled from the button label."""
    NAVIGATION = "navigation"
    PROMOTIONS = "promotions"
    ASK_QUESTION = "ask_question"
    SUBSCRIPTION = "subscription"
    ANNOUNCEMENTS = "announcements"
    SUPPORT = "support"


class ButtonAction(str, Enum):
    """Non-menu reply buttons with a special meaning."""
    SKIP = "skip"
    CANCEL = "cancel"


CANCEL_COMMAND = "/cancel"
