"""
Placeholder substitution.

Raw values may reference other keys with placeholder tokens, ``${other.key}``
by default. Substitution scans a value left to right and replaces every token
with the fully resolved value of the referenced key, which may itself contain
placeholders.

Rules:

- The referenced key is the text between the prefix and the first suffix
  after it, stripped of surrounding whitespace. Tokens do not nest.
- A prefix without a matching suffix is literal text.
- A reference to a key that no source defines is an ``UnresolvedPlaceholder``
  failure. It is never replaced by an empty string.
- A key met again while it is still being resolved is a
  ``CircularPlaceholder`` failure naming the whole cycle.

Resolution walks references with an explicit stack rather than recursion, so
only cycles are rejected, never long acyclic chains.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from .chain import SourceChain
from .failures import (
    CircularPlaceholder,
    Failure,
    MissingKey,
    ResolvedEntry,
    UnresolvedPlaceholder,
)
from .models import PlaceholderSyntax

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaceholderToken:
    """A placeholder found in a value. ``end`` is exclusive."""

    start: int
    end: int
    key: str
    text: str


@dataclass
class _Frame:
    key: str
    raw: str
    pos: int = 0
    parts: list[str] = field(default_factory=list)


def find_token(text: str, start: int, syntax: PlaceholderSyntax) -> PlaceholderToken | None:
    """Return the first complete placeholder at or after ``start``, if any."""
    begin = text.find(syntax.prefix, start)
    if begin < 0:
        return None
    close = text.find(syntax.suffix, begin + len(syntax.prefix))
    if close < 0:
        return None
    end = close + len(syntax.suffix)
    return PlaceholderToken(
        start=begin,
        end=end,
        key=text[begin + len(syntax.prefix) : close].strip(),
        text=text[begin:end],
    )


def find_tokens(text: str, syntax: PlaceholderSyntax) -> list[PlaceholderToken]:
    """All placeholders in ``text``, left to right."""
    tokens = []
    token = find_token(text, 0, syntax)
    while token is not None:
        tokens.append(token)
        token = find_token(text, token.end, syntax)
    return tokens


def resolve_placeholders(
    key: str,
    chain: SourceChain,
    syntax: PlaceholderSyntax,
    resolved: Mapping[str, ResolvedEntry | Failure] | None = None,
) -> ResolvedEntry | Failure:
    """
    Resolve ``key`` through the chain and substitute its placeholders.

    Args:
        key: Key to resolve.
        chain: Sources to read raw values from.
        syntax: Placeholder delimiters.
        resolved: Previously resolved entries that may be reused for referenced
                  keys (typically the resolver cache). Failures are ignored.

    Returns:
        A ResolvedEntry whose provenance is the source supplying the raw value
        of ``key``, or the first Failure met.
    """
    top = chain.lookup(key)
    if top is None:
        return MissingKey(key, chain.origins)

    stack = [_Frame(key, top.value)]
    active = {key}
    done: dict[str, str] = {}
    references: dict[str, None] = {}

    while stack:
        frame = stack[-1]
        token = find_token(frame.raw, frame.pos, syntax)

        if token is None:
            frame.parts.append(frame.raw[frame.pos :])
            value = "".join(frame.parts)
            stack.pop()
            active.discard(frame.key)
            if not stack:
                return ResolvedEntry(
                    key=key,
                    value=value,
                    raw_value=top.value,
                    origin=top.origin,
                    rank=top.rank,
                    references=tuple(references),
                )
            done[frame.key] = value
            stack[-1].parts.append(value)
            continue

        frame.parts.append(frame.raw[frame.pos : token.start])
        frame.pos = token.end
        ref = token.key
        references.setdefault(ref, None)

        if ref in active:
            first = next(i for i, f in enumerate(stack) if f.key == ref)
            cycle = tuple(f.key for f in stack[first:]) + (ref,)
            return CircularPlaceholder(key, cycle)

        if ref in done:
            frame.parts.append(done[ref])
            continue

        cached = resolved.get(ref) if resolved is not None else None
        if isinstance(cached, ResolvedEntry):
            for nested in cached.references:
                references.setdefault(nested, None)
            frame.parts.append(cached.value)
            continue

        lookup = chain.lookup(ref)
        if lookup is None:
            return UnresolvedPlaceholder(
                key=key,
                placeholder=ref,
                token=token.text,
                referenced_by=frame.key,
                searched=chain.origins,
            )

        stack.append(_Frame(ref, lookup.value))
        active.add(ref)

    # The loop always returns once the top-level frame completes
    raise AssertionError("unreachable")
