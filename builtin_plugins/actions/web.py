"""
Web parsers: <fetch url="..." prompt="..."/> and
<search query="..." domains="a.com,b.com" exclude="c.com"/> (alias web-search).
"""

from agent_actions.attributes import ParserUtils
from agent_actions.base import Action, FetchAction, SearchAction
from agent_actions.registry import ParserConfig


def parse_fetch(content: str, utils: ParserUtils) -> list[Action]:
    actions = []
    for tag in utils.find_tags(content, "fetch"):
        url = (utils.extract_attr(tag, "url") or "").strip()
        if url:
            actions.append(FetchAction(url=url, prompt=utils.extract_attr(tag, "prompt") or None))
    return actions


def parse_search(content: str, utils: ParserUtils) -> list[Action]:
    # Bare <search> tags without a query belong to edit bodies, not web search
    actions = []
    for tag in utils.find_tags(content, "search"):
        query = (utils.extract_attr(tag, "query") or "").strip()
        if not query:
            continue
        actions.append(
            SearchAction(
                query=query,
                allowed_domains=utils.extract_list_attr(tag, "domains"),
                blocked_domains=utils.extract_list_attr(tag, "exclude"),
            )
        )
    return actions


def get_parser_configs() -> list[ParserConfig]:
    return [
        ParserConfig(
            tags=["fetch"],
            self_closing_tags=["fetch"],
            parse=parse_fetch,
            description="Fetch a web page, optionally with an extraction prompt",
            usage='<fetch url="https://example.com/docs" prompt="List the endpoints"/>',
        ),
        ParserConfig(
            tags=["search", "web-search"],
            self_closing_tags=["search", "web-search"],
            parse=parse_search,
            description="Search the web",
            usage='<search query="python asyncio timeout" domains="docs.python.org"/>',
        ),
    ]
