"""Rich-text document tree and its Slack markup rendering.

The tree uses a closed set of node kinds. Every construct of the source
markup without a Slack equivalent is folded into ``NodeKind.TAG`` and rendered
as a literal ``<tag>...</tag>`` passthrough.

Delimiters:

    STRONG       *text*
    EMPHASIS     _text_
    PARAGRAPH    text followed by a blank line
    LINEBREAK    newline
    NBSP         space
    INLINE_CODE  `code`
    CODE_BLOCK   ```\\ncode\\n```\\n
    BLOCKQUOTE   every line prefixed with "> "
    LINK         <url|text>
    IMAGE        <url>
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from infrastructure.logging import get_module_logger

logger = get_module_logger()

QUOTE_PREFIX = "> "


class NodeKind(Enum):
    TEXT = "text"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    PARAGRAPH = "paragraph"
    LINEBREAK = "linebreak"
    NBSP = "nbsp"
    INLINE_CODE = "inline_code"
    CODE_BLOCK = "code_block"
    BLOCKQUOTE = "blockquote"
    LINK = "link"
    IMAGE = "image"
    TAG = "tag"


@dataclass
class RichText:
    """A node of a rich-text document.

    Attributes:
        kind: Node kind
        children: Child nodes of container kinds
        text: Literal content of TEXT, INLINE_CODE and CODE_BLOCK nodes
        url: Target of LINK and IMAGE nodes
        tag: Source tag name of TAG nodes
    """

    kind: NodeKind
    children: List["RichText"] = field(default_factory=list)
    text: str = ""
    url: Optional[str] = None
    tag: Optional[str] = None


Content = Union[RichText, str]


def _nodes(content: tuple) -> List[RichText]:
    return [text(c) if isinstance(c, str) else c for c in content]


def text(value: str) -> RichText:
    return RichText(NodeKind.TEXT, text=value)


def emphasis(*content: Content) -> RichText:
    return RichText(NodeKind.EMPHASIS, children=_nodes(content))


def strong(*content: Content) -> RichText:
    return RichText(NodeKind.STRONG, children=_nodes(content))


def paragraph(*content: Content) -> RichText:
    return RichText(NodeKind.PARAGRAPH, children=_nodes(content))


def linebreak() -> RichText:
    return RichText(NodeKind.LINEBREAK)


def nbsp() -> RichText:
    return RichText(NodeKind.NBSP)


def inline_code(code: str) -> RichText:
    return RichText(NodeKind.INLINE_CODE, text=code)


def code_block(code: str) -> RichText:
    return RichText(NodeKind.CODE_BLOCK, text=code)


def blockquote(*content: Content) -> RichText:
    return RichText(NodeKind.BLOCKQUOTE, children=_nodes(content))


def link(url: str, *content: Content) -> RichText:
    return RichText(NodeKind.LINK, children=_nodes(content), url=url)


def image(url: str, *alt: Content) -> RichText:
    return RichText(NodeKind.IMAGE, children=_nodes(alt), url=url)


def tag(name: str, *content: Content) -> RichText:
    return RichText(NodeKind.TAG, children=_nodes(content), tag=name)


def escape(value: str) -> str:
    """Escape the three control characters of Slack markup."""
    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def quote(rendered: str) -> str:
    """Prefix every line of already rendered markup with ``"> "``."""
    lines = rendered.rstrip("\n").split("\n")
    return "\n".join(QUOTE_PREFIX + line for line in lines)


def render_node(node: RichText) -> str:
    """Render a node, depth first, to Slack markup.

    Tags without a Slack substitute are emitted literally and every occurrence
    logs a warning.
    """

    def children() -> str:
        return "".join(render_node(child) for child in node.children)

    match node.kind:
        case NodeKind.TEXT:
            return escape(node.text)
        case NodeKind.STRONG:
            return f"*{children()}*"
        case NodeKind.EMPHASIS:
            return f"_{children()}_"
        case NodeKind.PARAGRAPH:
            return f"{children()}\n\n"
        case NodeKind.LINEBREAK:
            return "\n"
        case NodeKind.NBSP:
            return " "
        case NodeKind.INLINE_CODE:
            return f"`{escape(node.text)}`"
        case NodeKind.CODE_BLOCK:
            code = escape(node.text)
            if not code.endswith("\n"):
                code += "\n"
            return f"```\n{code}```\n"
        case NodeKind.BLOCKQUOTE:
            return quote(children())
        case NodeKind.LINK:
            label = children() or escape(node.url or "")
            return f"<{node.url}|{label}>"
        case NodeKind.IMAGE:
            return f"<{node.url}>"
        case _:
            name = node.tag or node.kind.value
            logger.warning("markup_tag_unsupported", tag=name)
            return f"<{name}>{children()}</{name}>"
