import copy
import os
from enum import Enum
from typing import List, Optional, Union

from lxml import etree

from core.logger import get_logger
from core.xliff_inline_tags import CODE_TAG_LOCALNAMES, CONTENT_TAG_LOCALNAMES, PROTECTED_ATTRIBUTES
from core.xliff_obj import TextLeaf

logger = get_logger(__name__)

XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"


class XliffVersion(str, Enum):
    V1 = "1"
    V2 = "2"


class NodeKind(Enum):
    ROOT = "root"
    FILE = "file"
    UNIT = "unit"
    SOURCE = "source"
    TARGET = "target"
    SEGMENT = "segment"
    TEXT = "text"
    OTHER = "other"


_KINDS_BY_VERSION = {
    XliffVersion.V1: {
        "xliff": NodeKind.ROOT,
        "file": NodeKind.FILE,
        "trans-unit": NodeKind.UNIT,
        "source": NodeKind.SOURCE,
        "target": NodeKind.TARGET,
    },
    XliffVersion.V2: {
        # 2.0 carries trgLang on <xliff> itself
        "xliff": NodeKind.FILE,
        "unit": NodeKind.UNIT,
        "segment": NodeKind.SEGMENT,
        "source": NodeKind.SOURCE,
        "target": NodeKind.TARGET,
    },
}


def localname(node) -> Optional[str]:
    """Element local name without namespace; None for comments / PIs."""
    if not isinstance(node.tag, str):
        return None
    return etree.QName(node).localname


def node_kind(node, version: XliffVersion) -> NodeKind:
    name = localname(node)
    if name is None:
        return NodeKind.OTHER
    return _KINDS_BY_VERSION[version].get(name, NodeKind.OTHER)


def detect_version(root) -> XliffVersion:
    """`version="2.0"` selects the 2.0 handlers; anything else is 1.x."""
    return XliffVersion.V2 if root.get("version") == "2.0" else XliffVersion.V1


def find_child(node, name: str):
    for child in node:
        if localname(child) == name:
            return child
    return None


def find_children(node, name: str) -> List:
    return [child for child in node if localname(child) == name]


def parse(data: Union[bytes, str]) -> etree._ElementTree:
    """
    Parses XLIFF content. Raises etree.XMLSyntaxError on malformed input.
    Blank text is kept so untouched units keep their layout; lxml still
    normalizes quoting and optional escapes on output.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    parser = etree.XMLParser(remove_blank_text=False, resolve_entities=False)
    root = etree.fromstring(data, parser)
    return root.getroottree()


def load(file_path: str) -> etree._ElementTree:
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")
    with open(file_path, "rb") as f:
        return parse(f.read())


def serialize(tree: etree._ElementTree) -> bytes:
    # lxml escapes < > & " inside attribute values on its own
    return etree.tostring(tree, encoding="utf-8", xml_declaration=True)


def save(tree: etree._ElementTree, output_path: str):
    data = serialize(tree)
    with open(output_path, "wb") as f:
        f.write(data)
        if not data.endswith(b"\n"):
            f.write(b"\n")


def clone_as_target(source, target_lang: Optional[str] = None):
    """
    Deep-copies a <source> subtree into an independent <target> element in
    the same namespace. The copy shares no nodes with the original.
    """
    target = copy.deepcopy(source)
    target.tag = etree.QName(etree.QName(source).namespace, "target").text
    if target_lang and target.get(XML_LANG) is not None:
        target.set(XML_LANG, target_lang)
    return target


def refill_from_source(target, source):
    """Copies the content of <source> into an empty <target>, keeping its attributes."""
    donor = copy.deepcopy(source)
    target.text = donor.text
    for child in list(donor):
        target.append(child)


def is_empty(node) -> bool:
    return not (node.text or "").strip() and len(node) == 0


def is_protected(node) -> bool:
    return any(node.get(attr) == value for attr, value in PROTECTED_ATTRIBUTES)


def text_leaves(node) -> List[TextLeaf]:
    """
    Collects the translatable text slots of a <source>/<target> subtree in
    document order. Text inside native-code inline elements (<ph>, <bpt>...)
    and inside protected content elements is skipped; their tails belong to
    the surrounding content.
    """
    leaves = []
    if node.text is not None:
        leaves.append(TextLeaf(node, "text"))
    for child in node:
        name = localname(child)
        if name in CONTENT_TAG_LOCALNAMES:
            if is_protected(child):
                logger.debug(f"Protected <{name}> kept as written")
            else:
                leaves.extend(text_leaves(child))
        elif name is not None and name not in CODE_TAG_LOCALNAMES:
            logger.debug(f"Unknown inline element <{name}> treated as code")
        if child.tail is not None:
            leaves.append(TextLeaf(child, "tail"))
    return leaves


def all_text(node) -> str:
    return "".join(node.itertext())
