"""Lockable pattern cache and prefix-glob matching.

Patterns come from the same wildcard syntax as ignore-rule files. Only two
wildcards are recognised: ``*`` (any run of characters, including ``/``) and
``?`` (any single character). Everything else is literal. A pattern matches
when it matches a *prefix* of the candidate path, so ``docs/`` matches every
file under ``docs``.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import structlog

from .attributes import AttributePath

logger = structlog.get_logger()


class TokenKind(str, Enum):
    """Glob token kinds."""
    LITERAL = "literal"
    ANY_CHAR = "any_char"
    ANY_RUN = "any_run"


@dataclass(frozen=True)
class GlobToken:
    kind: TokenKind
    text: str = ""


def tokenize_glob(pattern: str) -> tuple[GlobToken, ...]:
    """Split a glob into literal / any-char / any-run tokens.

    Adjacent literal characters are merged and consecutive ``*`` collapse
    into a single any-run token.
    """
    tokens: list[GlobToken] = []
    literal: list[str] = []
    
    def flush() -> None:
        if literal:
            tokens.append(GlobToken(TokenKind.LITERAL, "".join(literal)))
            literal.clear()
    
    for ch in pattern:
        if ch == "*":
            flush()
            if not tokens or tokens[-1].kind != TokenKind.ANY_RUN:
                tokens.append(GlobToken(TokenKind.ANY_RUN))
        elif ch == "?":
            flush()
            tokens.append(GlobToken(TokenKind.ANY_CHAR))
        else:
            literal.append(ch)
    flush()
    
    return tuple(tokens)


class GlobMatcher:
    """Prefix-anchored matcher for a single compiled glob."""
    
    def __init__(self, pattern: str):
        self.pattern = pattern
        self.tokens = tokenize_glob(pattern)
    
    def __repr__(self) -> str:
        return f"GlobMatcher({self.pattern!r})"
    
    def matches(self, path: str) -> bool:
        """Return True if the glob matches a prefix of ``path``."""
        tokens = self.tokens
        # (token index, path offset) pairs still to try, each tried once
        stack = [(0, 0)]
        seen: set[tuple[int, int]] = set()
        
        while stack:
            ti, pi = stack.pop()
            if (ti, pi) in seen:
                continue
            seen.add((ti, pi))
            
            if ti == len(tokens):
                return True
            
            token = tokens[ti]
            if token.kind == TokenKind.LITERAL:
                if path.startswith(token.text, pi):
                    stack.append((ti + 1, pi + len(token.text)))
            elif token.kind == TokenKind.ANY_CHAR:
                if pi < len(path):
                    stack.append((ti + 1, pi + 1))
            else:
                for next_pi in range(pi, len(path) + 1):
                    stack.append((ti + 1, next_pi))
        
        return False


def compile_glob(pattern: str) -> GlobMatcher:
    """Compile a lockable pattern into a path predicate."""
    return GlobMatcher(pattern)


class AttributeSource(Protocol):
    """Supplies attribute rules, e.g. parsed from .gitattributes."""
    
    def list_attribute_paths(self) -> list[AttributePath]:
        ...


class LockablePatternCache:
    """Caches lockable patterns and their compiled matchers.
    
    The pattern set is loaded lazily on first access and replaced wholesale
    after :meth:`invalidate`. One lock serialises population and
    invalidation so readers never see a half-built set.
    """
    
    def __init__(self, source: AttributeSource):
        self.source = source
        self._lock = threading.Lock()
        self._patterns: tuple[str, ...] | None = None
        self._matchers: tuple[GlobMatcher, ...] = ()
    
    def _populate(self) -> None:
        """Load patterns from the attribute source. Caller holds the lock."""
        patterns = tuple(
            attr.path for attr in self.source.list_attribute_paths() if attr.lockable
        )
        self._matchers = tuple(compile_glob(p) for p in patterns)
        self._patterns = patterns
        
        logger.debug("Loaded lockable patterns", count=len(patterns))
    
    def get_patterns(self) -> tuple[str, ...]:
        """Return the lockable patterns, loading them if needed."""
        with self._lock:
            if self._patterns is None:
                self._populate()
            return self._patterns
    
    def get_matchers(self) -> tuple[GlobMatcher, ...]:
        """Return compiled matchers for the current pattern set."""
        with self._lock:
            if self._patterns is None:
                self._populate()
            return self._matchers
    
    def invalidate(self) -> None:
        """Drop cached patterns; the next read reloads them."""
        with self._lock:
            self._patterns = None
            self._matchers = ()
        
        logger.debug("Invalidated lockable patterns")
    
    def is_lockable(self, path: str) -> bool:
        """Whether a canonical repo-relative path matches a lockable pattern."""
        for matcher in self.get_matchers():
            if matcher.matches(path):
                return True
        return False
