"""Markdown to Slack markup translation.

Free text written by users (ticket descriptions, comments) is Markdown. Slack
accepts a much smaller markup dialect, so the source is parsed into a
``RichText`` tree and rendered with the delimiters of ``rich_text``.

Rendering a source document runs three steps:

1. Quotation runs (lines starting with ``"> "``) are cut out, rendered on
   their own and replaced by placeholder tokens. Slack has no nested block
   quotes, so quoting is applied to the rendered output line by line.
2. Mentions, ticket references and commit ids are rewritten as Markdown links.
3. The result is parsed with markdown-it under a time bound, rendered, and the
   quotations are substituted back in.

A parse that exceeds its bound falls back to the unrendered source.
"""

import re
import uuid
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from threading import Lock
from typing import List, Optional, Union

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from infrastructure.logging import get_module_logger
from modules.notifications import rich_text
from modules.notifications.exceptions import ParseTimeout
from modules.notifications.links import LinkBuilder
from modules.notifications.rich_text import RichText, render_node

logger = get_module_logger()

MENTION_PATTERN = re.compile(r"(^|\s)@([A-Za-z0-9_-]+)", re.MULTILINE)
TICKET_PATTERN = re.compile(r"(^|[\s,(])#(\d+)(?=$|[\s,.:;!?)])", re.MULTILINE)

NBSP = "\u00a0"

# Block nodes outside paragraphs need their own trailing blank line so the
# following block does not run into them.
_TOP_LEVEL_PARENTS = ("root", "blockquote")


def _commit_pattern(short_length: int) -> "re.Pattern[str]":
    return re.compile(
        rf"(^|\s)([0-9a-fA-F]{{{short_length},40}})(?![0-9A-Za-z_])",
        re.MULTILINE,
    )


def _placeholder(nonce: str, index: int) -> str:
    # Letters and digits only: markdown leaves it untouched and no autolink
    # pattern matches inside it.
    return f"SLACKQUOTE{nonce}N{index}END"


class MarkupTranslator:
    """Renders Markdown or ``RichText`` trees as Slack markup.

    Args:
        links: Builds mention, ticket and commit links
        short_commit_id_length: Shortest hex run treated as a commit id
        parse_timeout: Seconds the structural parse may take
    """

    def __init__(
        self,
        links: LinkBuilder,
        short_commit_id_length: int = 6,
        parse_timeout: float = 2.0,
    ):
        self.links = links
        self.short_commit_id_length = short_commit_id_length
        self.parse_timeout = parse_timeout
        self._commit_pattern = _commit_pattern(short_commit_id_length)
        self._md = MarkdownIt("commonmark").enable(["table", "strikethrough"])
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = Lock()

    def render(
        self,
        source: Union[str, RichText, None],
        repository: Optional[str] = None,
    ) -> Optional[str]:
        """Render Markdown source or a ``RichText`` node to Slack markup.

        Args:
            source: Markdown text or an already built node
            repository: Repository the text belongs to; ticket and commit
                references are only linked when it is known

        Returns:
            Slack markup. A node renders with its exact delimiters; Markdown
            output has trailing newlines stripped. The unrendered source is
            returned when parsing times out.
        """
        if isinstance(source, RichText):
            return render_node(source)
        if not source:
            return source

        try:
            return self._render_source(source, repository)
        except ParseTimeout:
            logger.warning(
                "markup_parse_timeout",
                timeout=self.parse_timeout,
                length=len(source),
            )
            return source

    def autolink(self, source: str, repository: Optional[str] = None) -> str:
        """Rewrite mentions, ticket references and commit ids as links."""

        def mention(match: "re.Match[str]") -> str:
            name = match.group(2)
            return f"{match.group(1)}**[@{name}]({self.links.user_url(name)})**"

        text = MENTION_PATTERN.sub(mention, source)
        if not repository:
            return text

        def ticket(match: "re.Match[str]") -> str:
            number = match.group(2)
            url = self.links.ticket_url(repository, number)
            return f"{match.group(1)}[#{number}]({url})"

        def commit(match: "re.Match[str]") -> str:
            sha = match.group(2)
            short = sha[: self.short_commit_id_length]
            url = self.links.repository_url(repository, None, sha)
            return f"{match.group(1)}[`{short}`]({url})"

        text = TICKET_PATTERN.sub(ticket, text)
        return self._commit_pattern.sub(commit, text)

    def parse(self, source: str) -> List[RichText]:
        """Parse Markdown into top-level ``RichText`` nodes within the bound.

        Raises:
            ParseTimeout: parsing did not finish within ``parse_timeout``
        """
        future = self._get_or_create_executor().submit(self._parse_tree, source)
        try:
            return future.result(timeout=self.parse_timeout)
        except FuturesTimeoutError as e:
            future.cancel()
            raise ParseTimeout(
                f"Markup parse exceeded {self.parse_timeout} seconds"
            ) from e

    def close(self) -> None:
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=False, cancel_futures=True)
                self._executor = None

    def _render_source(self, source: str, repository: Optional[str]) -> str:
        nonce = uuid.uuid4().hex
        quotes: List[str] = []
        text = self._extract_quotes(source, repository, nonce, quotes)
        text = self.autolink(text, repository)

        rendered = "".join(render_node(node) for node in self.parse(text))

        for index, quoted in enumerate(quotes):
            rendered = rendered.replace(_placeholder(nonce, index), quoted)
        return rendered.rstrip("\n")

    def _extract_quotes(
        self,
        source: str,
        repository: Optional[str],
        nonce: str,
        quotes: List[str],
    ) -> str:
        lines: List[str] = []
        run: List[str] = []

        def flush() -> None:
            if not run:
                return
            inner = self._render_source("\n".join(run), repository)
            lines.append(_placeholder(nonce, len(quotes)))
            quotes.append(rich_text.quote(inner))
            run.clear()

        for line in source.split("\n"):
            if line.startswith(rich_text.QUOTE_PREFIX) or line == ">":
                run.append(line[len(rich_text.QUOTE_PREFIX) :])
            else:
                flush()
                lines.append(line)
        flush()
        return "\n".join(lines)

    def _parse_tree(self, source: str) -> List[RichText]:
        root = SyntaxTreeNode(self._md.parse(source))
        return _fold(root)

    def _get_or_create_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=4,
                    thread_name_prefix="markup-parse",
                )
            return self._executor


def _split_nbsp(value: str) -> List[RichText]:
    nodes: List[RichText] = []
    for index, part in enumerate(value.split(NBSP)):
        if index:
            nodes.append(rich_text.nbsp())
        if part:
            nodes.append(rich_text.text(part))
    return nodes


def _fold(node: SyntaxTreeNode) -> List[RichText]:
    """Fold a markdown-it syntax tree into ``RichText`` nodes."""
    children = [folded for child in node.children for folded in _fold(child)]

    match node.type:
        case "root" | "inline":
            return children
        case "text":
            return _split_nbsp(node.content)
        case "html_inline" | "html_block":
            return [rich_text.text(node.content)]
        case "softbreak" | "hardbreak":
            return [rich_text.linebreak()]
        case "em":
            return [rich_text.emphasis(*children)]
        case "strong":
            return [rich_text.strong(*children)]
        case "paragraph":
            # Tight list items hide their paragraphs
            if node.hidden:
                return children
            return [rich_text.paragraph(*children)]
        case "code_inline":
            return [rich_text.inline_code(node.content)]
        case "fence" | "code_block":
            return [rich_text.code_block(node.content)]
        case "link":
            return [rich_text.link(node.attrs.get("href", ""), *children)]
        case "image":
            return [rich_text.image(node.attrs.get("src", ""), *children)]
        case "blockquote":
            folded = rich_text.blockquote(*children)
        case _:
            folded = rich_text.tag(node.tag or node.type, *children)

    parent = node.parent
    if node.block and parent is not None and parent.type in _TOP_LEVEL_PARENTS:
        return [rich_text.paragraph(folded)]
    return [folded]
