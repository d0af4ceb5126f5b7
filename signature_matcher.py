"""
Signature Matcher Module
========================
Classifies a line (or an accumulated multi-line span) of C++ source text as a
function signature using shallow regular-expression heuristics.

Recognized shapes, tried in priority order:
- Function:     <returnType> <Owner>::<Function>(<params>) [const]
- Constructor:  <Owner>::<Function>(<params>)

A looser "start of function" pattern is used to decide whether a line that
does not fully match might be the first line of a signature that continues
on the following lines.
"""

import re
import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


# Function regex (explicit return type, optional trailing const)
FUNCTION_PATTERN = re.compile(
    r"^(?P<returnType>[\w\*]+)\s+(?P<ownerName>\w+)::(?P<functionName>\w+)"
    r"\((?P<parameterList>.*)\)\s*(const)?$",
    re.IGNORECASE
)

# Constructor regex (no return type)
CONSTRUCTOR_PATTERN = re.compile(
    r"^(?P<ownerName>\w+)::(?P<functionName>\w+)\((?P<parameterList>.*)\)\s*$",
    re.IGNORECASE
)

# Partial function match (start of a function spanning multiple lines)
START_OF_FUNCTION_PATTERN = re.compile(
    r"^(?P<returnType>[\w\*]+)\s+(?P<ownerName>\w+)::(?P<functionName>\w+)",
    re.IGNORECASE
)

SIGNATURE_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ('function', FUNCTION_PATTERN),
    ('constructor', CONSTRUCTOR_PATTERN),
]


class MatchResult(BaseModel):
    """
    Fields extracted from a successful signature match.

    Attributes:
        return_type: Return type text, 'void' when the pattern had none
        owner_name: Class name before the scope resolution operator
        function_name: Function name after the scope resolution operator
        parameter_list: Raw comma-joined parameter text
        pattern_name: Name of the pattern that matched
    """
    return_type: str = Field(default="void", description="Return type, normalized to void")
    owner_name: str = Field(..., description="Owning class name")
    function_name: str = Field(..., description="Function name")
    parameter_list: str = Field(default="", description="Raw parameter list")
    pattern_name: str = Field(default="function", description="Pattern that produced the match")

    @field_validator('return_type', mode='before')
    @classmethod
    def normalize_return_type(cls, v: Optional[str]) -> str:
        """Missing or empty return types are treated as void"""
        if not v:
            return "void"
        return v


class SignatureMatcher:
    """
    Ordered set of signature patterns plus one partial-start pattern.

    The matcher holds no per-call state; a single instance can be reused for
    any number of lines.
    """

    def __init__(self, patterns: Optional[List[Tuple[str, re.Pattern]]] = None,
                 start_pattern: Optional[re.Pattern] = None):
        self.patterns = list(patterns) if patterns is not None else list(SIGNATURE_PATTERNS)
        self.start_pattern = start_pattern or START_OF_FUNCTION_PATTERN
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Setup logging for signature matching."""
        logger = logging.getLogger('signature_matcher')
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def match(self, text: str) -> Optional[MatchResult]:
        """
        Match text against each signature pattern in priority order.

        Args:
            text: Line or accumulated lines to classify

        Returns:
            MatchResult for the first matching pattern, None if nothing matched
        """
        for pattern_name, pattern in self.patterns:
            match = pattern.match(text)
            if match is None:
                continue

            groups = match.groupdict()
            result = MatchResult(
                return_type=groups.get('returnType'),
                owner_name=groups['ownerName'],
                function_name=groups['functionName'],
                parameter_list=groups.get('parameterList') or "",
                pattern_name=pattern_name
            )
            self.logger.debug(
                f"Matched {pattern_name} signature: {result.owner_name}::{result.function_name}"
            )
            return result

        return None

    def matches_partial_start(self, text: str) -> bool:
        """Check if text looks like the first line of a multi-line signature."""
        return self.start_pattern.match(text) is not None
