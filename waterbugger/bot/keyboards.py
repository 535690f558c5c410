"""Inline keyboard builders."""

from typing import List, Tuple

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from waterbugger.utils.constants import CONFIRM_CALLBACK, POSTPONE_CALLBACK


def drink_reminder_buttons(glass_size: int, reminder_delay: int) -> List[Tuple[str, str]]:
    """Button labels and callback data for a drink reminder: Yes, Not yet."""
    return [
        (f"✓ Yes (+{glass_size} mL)", CONFIRM_CALLBACK),
        (f"⏸ Not yet ({reminder_delay} mins)", POSTPONE_CALLBACK),
    ]


def reminder_keyboard(buttons: List[Tuple[str, str]]) -> InlineKeyboardMarkup | None:
    """Single-row keyboard for a reminder, or None if it has no buttons."""
    if not buttons:
        return None

    return InlineKeyboardMarkup(
        [[InlineKeyboardButton(label, callback_data=data) for label, data in buttons]]
    )
