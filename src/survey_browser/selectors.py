"""CSS selectors for the target questionnaire platform.

Defaults match the wjx.cn mobile/desktop form markup.  Each question lives in
a container ``#div{question_id}`` whose ``topic`` attribute is the question
id; choice inputs are hidden and clicked through the sibling ``<a>`` the
platform renders after them.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FormSelectors:
    """Selector set used by the Playwright session and the schema extractor."""

    # Per-question container; formatted with question_id
    question_container: str = "#div{question_id}"
    # Clickable widget for an option, relative to the container; formatted with value
    option: str = 'input[value="{value}"] + a'
    text_input: str = 'input[type="text"], textarea'

    submit_button: str = "#ctlNext"
    challenge: str = "#captchaOut"
    challenge_button: str = "#SM_BTN_1, .sm-btn"

    # Schema extraction
    question_root: str = "#divQuestion"
    question_item: str = "#divQuestion > .fieldset > .field[topic]"
    question_title: str = ".topichtml"
    option_label: str = ".ui-controlgroup .label"


def css_string(value: str) -> str:
    """Escape a value for use inside a double-quoted CSS attribute selector."""
    return value.replace("\\", "\\\\").replace('"', '\\"')
