"""Published Personalia error ids with their description and remediation hint.

The catalog is read-only: ``ERROR_CATALOG`` is a ``MappingProxyType`` and
entries are frozen models.
"""

from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel


class ErrorCatalogEntry(BaseModel):
    model_config = {"frozen": True}

    description: str
    remediation: str


_API_KEY_FIX = (
    "Copy the correct API key from the template's workspace in the Personalia "
    "dashboard and paste it into your API call."
)
_RULES_FIX = "Contact the designer to fix the rule logic defined in uCreate."

_ENTRIES = {
    "101": ("API key does not belong to this template.", _API_KEY_FIX),
    "102": ("Invalid or missing API key.", _API_KEY_FIX),
    "103": (
        "Invalid Template ID.",
        "Copy the correct template ID from the Personalia dashboard and paste it into your API call.",
    ),
    "104": (
        "Invalid value(s) in the Output section.",
        "Fix your API call. Check the Output section and validate that all the values of the parameters are valid.",
    ),
    "105": (
        "Unable to fetch more than the maximum allowed Fetch URLs.",
        "Contact the designer to reduce the number of Fetch URLs in the template in uCreate.",
    ),
    "106": (
        "Unable to fetch more than the maximum allowed total size of all Fetch URLs.",
        "Reduce the Fetch URL sizes so that the total size of all Fetch URLs does not exceed "
        "the maximum. Alternatively, use different images.",
    ),
    "107": (
        "Failed to fetch the Fetch URL or it timed out.",
        "Correct the image or the URL. Alternatively, use a different image.",
    ),
    "108": (
        "Invalid/unsupported image format in Fetch URL.",
        "Use a different image format. Only PNG & JPG are supported.",
    ),
    "109": (
        "Invalid JSON syntax.",
        "Fix your API call. Check the JSON and validate that all mandatory parameters are "
        "included and that their types are valid.",
    ),
    "111": (
        "Input field is missing in the API call.",
        "Fix your API call. Validate that all expected input fields are included.",
    ),
    "112": (
        "Invalid date format in input field.",
        "Fix your API call. Expected date format is YYYY-MM-DD (e.g., 2023-07-24).",
    ),
    "113": (
        "Invalid number format in input field.",
        "Fix your API call. Valid number format is: No comma separator allowed, only 1 period "
        "(optional) and it can be a negative number.",
    ),
    "114": (
        "Invalid Fetch protocol. It must be HTTP or HTTPS.",
        "Fix your API call. Use HTTP/HTTPS in the Fetch URL.",
    ),
    "117": (
        "Insufficient credits.",
        "Insufficient credits remaining this month for your account. To increase the number "
        "of credits, upgrade your subscription plan.",
    ),
    "118": ("Unsupported output format.", "Only PDF is supported."),
    "1000": ("Something went wrong.", "Contact support."),
    "1001": ("Invalid logic in a rule.", "Contact the designer to check the rules defined in uCreate."),
    "1002": (
        "Something went wrong in a design document.",
        "Contact the designer to fix the document in uCreate.",
    ),
    "1003": ("Input value(s) resulted in invalid barcode generation.", _RULES_FIX),
    "1004": ("No output. This may be due to Skip or Abort logic defined in uCreate.", _RULES_FIX),
    "1005": ("Input value(s) resulted in division by zero.", _RULES_FIX),
    "1006": (
        "Missing graphic or text asset detected.",
        "Contact the designer to fix the design and include the asset in uCreate.",
    ),
    "1007": (
        "Missing style detected.",
        "Contact the designer to fix the design and include the style in uCreate.",
    ),
    "1008": (
        "Missing font detected.",
        "Contact the designer to fix the design and include the font in uCreate.",
    ),
    "1009": (
        "Text overflow detected.",
        "Contact the designer to fix the design in uCreate either by copyfitting or "
        "truncating the input value.",
    ),
}

ERROR_CATALOG: Mapping[str, ErrorCatalogEntry] = MappingProxyType(
    {
        error_id: ErrorCatalogEntry(description=description, remediation=remediation)
        for error_id, (description, remediation) in _ENTRIES.items()
    }
)

# Contract with the remote service: these ids never succeed on retry.
# 105-108 are the Fetch URL failures.
PERMANENT_ERROR_IDS: frozenset[str] = frozenset(
    {
        "101", "102", "103", "104",
        "105", "106", "107", "108",
        "109", "111", "112", "113", "114",
        "117", "118",
    }
)
