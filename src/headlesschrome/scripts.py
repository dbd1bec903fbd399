"""JavaScript snippet builders for the Chrome console.

Every caller-supplied string is serialized as a JSON string literal before
it is embedded, so quotes, backslashes and newlines cannot terminate the
literal or split the command across console lines.
"""

from __future__ import annotations

import json


def js_string(value: str) -> str:
    """Return *value* as a double-quoted, fully escaped JavaScript literal."""
    return json.dumps(str(value))


def _by_classes(classes: str, index: int) -> str:
    return f"document.getElementsByClassName({js_string(classes)})[{int(index)}]"


def _inner_html_filter(element_type: str, prefix: str) -> str:
    return (
        f"var x = $({js_string(element_type)}).filter(function(idx) "
        f"{{ return this.innerHTML.indexOf({js_string(prefix)}) == 0; }});"
    )


# --- clicking ---

def click_selector(selector: str) -> str:
    return f"document.querySelector({js_string(selector)}).click()"


def click_item_with_classes(classes: str, index: int) -> str:
    """Click the *index*-th element carrying *classes* (space separated)."""
    return f"{_by_classes(classes, index)}.click()"


def click_item_with_id(element_id: str) -> str:
    return f"document.getElementById({js_string(element_id)}).click()"


def click_item_with_inner_html(element_type: str, prefix: str, index: int) -> str:
    """Click the *index*-th *element_type* whose innerHTML starts with *prefix*.

    Relies on the page exposing jQuery as ``$``.
    """
    return f"{_inner_html_filter(element_type, prefix)}x[{int(index)}].click()"


# --- reading ---

def get_item_with_inner_html(element_type: str, prefix: str, index: int) -> str:
    return f"{_inner_html_filter(element_type, prefix)}x[{int(index)}]"


def get_content_of_item_with_classes(classes: str, index: int) -> str:
    return f"{_by_classes(classes, index)}.innerHTML"


def get_content_of_item_with_selector(selector: str) -> str:
    return f"document.querySelector({js_string(selector)}).innerHTML"


def get_value_of_item_with_classes(classes: str, index: int) -> str:
    """Read the form value of the *index*-th element carrying *classes*."""
    return f"{_by_classes(classes, index)}.value"


# --- writing ---

def set_text_by_id(element_id: str, text: str) -> str:
    return f"document.getElementById({js_string(element_id)}).innerHTML = {js_string(text)}"


def set_text_by_classes(classes: str, index: int, text: str) -> str:
    return f"{_by_classes(classes, index)}.innerHTML = {js_string(text)}"


def set_input_text_by_classes(classes: str, index: int, text: str) -> str:
    return f"{_by_classes(classes, index)}.value = {js_string(text)}"
