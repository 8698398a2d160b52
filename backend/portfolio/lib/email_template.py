from html import escape
from typing import Tuple


def render_greeting(name: str) -> Tuple[str, str]:
    """Return (html, text) bodies for the contact notification."""
    html = f"<div><h1>Welcome, {escape(name)}!</h1></div>"
    text = f"Welcome, {name}!"
    return html, text
