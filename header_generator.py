"""
Function Header Generator
=========================
Builds the documentation comment block inserted above a matched function
signature. The output follows the Doxygen-style convention used by the
downstream documentation tooling and must stay byte-for-byte stable:

    /**-------------------------------------------------------------
    * @brief <brief>
    *
    * @param <name>
    *
    * @return
    */
"""

from typing import List

from pydantic import BaseModel, Field

from signature_matcher import MatchResult


HEADER_OPEN = "/**-------------------------------------------------------------"
HEADER_CLOSE = "*/"
SEPARATOR = "*"

# Briefs for well-known engine callbacks, checked after the constructor rule
TICK_BRIEF = "Called every frame"
KNOWN_BRIEFS = {
    "BeginPlay": "Called once actor has been spawned into world",
    "EndPlay": "Called when actor is being removed from world",
    "OnConstruction": "Called after spawning actor but before play",
}
CONSTRUCTOR_BRIEF = "Default constructor"


class HeaderBlock(BaseModel):
    """Generated comment block, one entry per output line."""
    lines: List[str] = Field(..., min_length=2, description="Comment lines without terminators")

    def to_text(self) -> str:
        """Join the block into insertable text, newline-terminated."""
        return "".join(f"{line}\n" for line in self.lines)

    @property
    def param_count(self) -> int:
        return sum(1 for line in self.lines if line.startswith("* @param "))

    @property
    def has_return(self) -> bool:
        return "* @return " in self.lines


def split_parameters(parameter_list: str) -> List[str]:
    """
    Split a raw parameter list into trimmed fragments.

    An empty list yields no fragments. Fragments are not validated, so a
    trailing comma produces an empty fragment.
    """
    fragments = parameter_list.split(',')
    if len(fragments) == 1 and fragments[0] == "":
        return []
    return [fragment.strip() for fragment in fragments]


def parameter_name(fragment: str) -> str:
    """Best-effort name: text after the last space, or the whole fragment."""
    return fragment.strip().rsplit(' ', 1)[-1]


def brief_for(match: MatchResult) -> str:
    """Pick the brief description for a matched function, empty if unknown."""
    function_name = match.function_name

    if function_name == match.owner_name:
        return CONSTRUCTOR_BRIEF
    if "Tick" in function_name:
        return TICK_BRIEF
    return KNOWN_BRIEFS.get(function_name, "")


class HeaderGenerator:
    """Turns a MatchResult into a HeaderBlock."""

    def generate(self, match: MatchResult) -> HeaderBlock:
        """
        Generate the function header block for a matched signature.

        Args:
            match: Fields extracted by SignatureMatcher.match

        Returns:
            HeaderBlock with brief, optional parameters and optional return
        """
        lines = [HEADER_OPEN, f"* @brief {brief_for(match)}"]

        fragments = split_parameters(match.parameter_list)
        if fragments:
            # Asterisk between brief and params
            lines.append(SEPARATOR)
            for fragment in fragments:
                lines.append(f"* @param {parameter_name(fragment)} ")

        if match.return_type != "void":
            lines.append(SEPARATOR)
            lines.append("* @return ")

        lines.append(HEADER_CLOSE)
        return HeaderBlock(lines=lines)
