import re

# Inline elements whose content is native code (markup of the original
# format); their inner text is never sent for translation.
CODE_TAG_LOCALNAMES = (
    "bpt",
    "ept",
    "ph",
    "it",
    "x",
    "bx",
    "ex",
    # XLIFF 2.0
    "sc",
    "ec",
    "sm",
    "em",
    "cp",
)

# Inline elements that wrap translatable text.
CONTENT_TAG_LOCALNAMES = (
    "g",
    "mrk",
    "pc",
    "sub",
)

# Content elements carrying one of these attribute values hold text that must
# stay as written (1.2 <mrk mtype="protected">, 2.0 translate="no").
PROTECTED_ATTRIBUTES = (
    ("mtype", "protected"),
    ("translate", "no"),
)

# Marks ICU-style pluralization (Angular i18n extraction).
PLURAL_MARKERS = ("{VAR_PLURAL",)

# Opt-in (--keep-select): select branches get the same treatment as plurals.
ICU_SELECT_MARKERS = ("{VAR_SELECT",)

DEFAULT_PLACEHOLDER_PATTERNS = (
    r"\{VAR_[A-Z_]+[^{}]*\}",       # flat {VAR_PH_1}; nested ICU branches never match
    r"\{\{.*?\}\}",                 # {{ interpolation }}
    r"\$\{[^{}]*\}",                # ${name}
    r"\{[\w.\-]*\}",                # {0}, {name}
    r"%(?:\d+\$)?[-+ #0]*\d*(?:\.\d+)?[sdifFeEgGxXoucpr@%]",  # printf
    r"&(?:#\d+|#x[0-9a-fA-F]+|[a-zA-Z]+);",  # &nbsp; &#160;
)

PLACEHOLDER_REGEX = re.compile("|".join(DEFAULT_PLACEHOLDER_PATTERNS), re.DOTALL)
