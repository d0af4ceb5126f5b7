"""Tests for header block generation."""

import pytest

from header_generator import (
    HEADER_OPEN,
    HeaderGenerator,
    parameter_name,
    split_parameters,
)
from signature_matcher import MatchResult, SignatureMatcher


def header_for(text):
    match = SignatureMatcher().match(text)
    assert match is not None, text
    return HeaderGenerator().generate(match)


def test_opening_fence_is_exact():
    assert HEADER_OPEN == "/**" + "-" * 61


def test_return_only_header():
    header = header_for("int MyClass::GetValue()")
    assert header.to_text() == (
        HEADER_OPEN + "\n"
        "* @brief \n"
        "*\n"
        "* @return \n"
        "*/\n"
    )


def test_tick_header_with_parameter():
    header = header_for("void MyClass::Tick(float DeltaTime)")
    assert header.to_text() == (
        HEADER_OPEN + "\n"
        "* @brief Called every frame\n"
        "*\n"
        "* @param DeltaTime \n"
        "*/\n"
    )


def test_constructor_header():
    header = header_for("MyClass::MyClass()")
    assert header.to_text() == (
        HEADER_OPEN + "\n"
        "* @brief Default constructor\n"
        "*/\n"
    )


def test_parameters_and_return_in_order():
    header = header_for("int* MyClass::Compute(int a, float b)")
    assert header.lines == [
        HEADER_OPEN,
        "* @brief ",
        "*",
        "* @param a ",
        "* @param b ",
        "*",
        "* @return ",
        "*/",
    ]


@pytest.mark.parametrize("signature, brief", [
    ("void AActor::BeginPlay()", "Called once actor has been spawned into world"),
    ("void AActor::EndPlay(const EEndPlayReason::Type Reason)", "Called when actor is being removed from world"),
    ("void AActor::OnConstruction(const FTransform& Transform)", "Called after spawning actor but before play"),
    ("void AActor::TickComponent(float DeltaTime)", "Called every frame"),
    ("void AActor::PostTick()", "Called every frame"),
    ("void AActor::beginplay()", ""),
    ("void AActor::tick()", ""),
    ("bool AActor::IsValid()", ""),
])
def test_brief_heuristics(signature, brief):
    assert header_for(signature).lines[1] == f"* @brief {brief}"


def test_constructor_rule_wins_over_tick():
    header = header_for("ATicker::ATicker()")
    assert header.lines[1] == "* @brief Default constructor"


def test_constructor_rule_applies_with_return_type_field():
    match = MatchResult(return_type="int", owner_name="Foo", function_name="Foo", parameter_list="int a")
    assert HeaderGenerator().generate(match).lines[1] == "* @brief Default constructor"


def test_void_never_gets_return_section():
    header = header_for("void A::Run(int a)")
    assert not header.has_return
    assert "* @return " not in header.to_text()


@pytest.mark.parametrize("parameter_list, count", [
    ("", 0),
    ("int a", 1),
    ("int a, int b", 2),
    ("int a,int b,int c,int d", 4),
    ("int a,", 2),
    ("   ", 1),
])
def test_param_line_count_matches_fragments(parameter_list, count):
    match = MatchResult(owner_name="A", function_name="f", parameter_list=parameter_list)
    header = HeaderGenerator().generate(match)
    assert header.param_count == count
    # A single separator precedes the parameter lines, none without parameters
    assert header.lines.count("*") == (1 if count else 0)


def test_parameter_name_heuristics():
    assert parameter_name("float DeltaTime") == "DeltaTime"
    assert parameter_name("  const FString& Name  ") == "Name"
    assert parameter_name("int* ptr") == "ptr"
    assert parameter_name("int *ptr") == "*ptr"
    assert parameter_name("void") == "void"
    assert parameter_name("int  spaced") == "spaced"
    assert parameter_name("") == ""


def test_trailing_comma_yields_empty_name():
    assert split_parameters("int a,") == ["int a", ""]
    header = header_for("void A::f(int a,)")
    assert header.lines[3:5] == ["* @param a ", "* @param  "]


def test_generation_is_deterministic():
    text = "int* MyClass::Compute(int a, float b)"
    assert header_for(text).to_text() == header_for(text).to_text()
