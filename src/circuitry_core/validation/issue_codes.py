# src/circuitry_core/validation/issue_codes.py
import logging
from enum import Enum

logger = logging.getLogger(__name__)


class ProblemIssueCode(Enum):
    """
    Registry of problem content issue codes and their message templates.
    Each enum member's value is a tuple: (code_str, message_template_str).
    """

    # --- Component Issues (COMP_...) ---
    COMP_DUPLICATE_ID = ("COMP_DUPLICATE_ID", "Component id '{component_id}' is used more than once.")
    COMP_RESERVED_ID = ("COMP_RESERVED_ID", "Component id '{component_id}' is reserved for the worksheet {row} row.")
    COMP_NOT_IN_NETWORK = ("COMP_NOT_IN_NETWORK", "Load '{component_id}' is not placed anywhere in the network.")
    COMP_NO_RESISTANCE = ("COMP_NO_RESISTANCE", "Load '{component_id}' has no positive resistance (found {resistance}).")

    # --- Network Issues (NET_...) ---
    NET_EMPTY_NODE = ("NET_EMPTY_NODE", "{node} has no children.")
    NET_UNKNOWN_LEAF = ("NET_UNKNOWN_LEAF", "The network references unknown component '{component_id}'.")
    NET_DUPLICATE_LEAF = ("NET_DUPLICATE_LEAF", "Component '{component_id}' appears {count} times in the network.")
    NET_DUPLICATE_NODE_ID = ("NET_DUPLICATE_NODE_ID", "Group id '{node_id}' is used by {count} series/parallel groups.")
    NET_SINGLE_CHILD = ("NET_SINGLE_CHILD", "{node} has a single child and could be removed.")

    # --- Target & Totals Issues ---
    TARGET_UNKNOWN_ROW = ("TARGET_UNKNOWN_ROW", "Target row '{row_id}' is not a load, the source or the totals row.")
    TOTALS_UNDERDETERMINED = ("TOTALS_UNDERDETERMINED", "The source provides no voltage, current or power, so the circuit cannot be solved.")

    # --- Solve Issues (SOLVE_...) ---
    SOLVE_FAILED = ("SOLVE_FAILED", "The problem cannot be solved: {message}")
    GIVEN_MISMATCH = ("GIVEN_MISMATCH", "Authored {metric} of {row} is {authored}, but the solved circuit gives {solved}.")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def template(self) -> str:
        return self.value[1]

    def format_message(self, **kwargs) -> str:
        """Formats the message template with provided keyword arguments."""
        try:
            return self.template.format(**kwargs)
        except KeyError as e:
            logger.error(f"Missing key {e} for formatting message template of {self.name} (code: {self.code}): '{self.template}'. Provided args: {kwargs}")
            return f"Error formatting message for {self.code}: Missing key {e}. Template: '{self.template}' Args: {kwargs}"
