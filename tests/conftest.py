"""Shared pytest fixtures for tagdocs tests."""

from pathlib import Path

import pytest

from tagdocs.builder import build_from_sources

EXAMPLE_1 = """\
-- @class Math
-- @desc My Add function is very cool!
-- @param x, number, Value 1
-- @param y, number, Value 2
-- @return Sum of two numbers
function Add(x,y)
    return x+y
end

--@ class Math
--@ desc Subtracts the second number from the first
--@ param x: number The first number
--@ param y: number The second number to subtract
--@ return number The result of x - y
function Math.subtract(x, y)
    return x - y
end

-- a simple comment

--@ class Array
--@ desc Finds the maximum value in an array of numbers
--@ param arr table An array of numbers
--@ return number The maximum value found
--@ return boolean True if array was not empty, false otherwise
function Array.max(arr)
    if(#arr == 0) then
        return nil, false
    end
    return arr[1], true
end
"""

EXAMPLE_3 = """\
--@ desc A simple greeting function that demonstrates
--@ desc multi-line descriptions across multiple
--@ desc comment lines
--@ param name string The person's name
--@ param greeting string Optional greeting word
function greet(name, greeting)
    greeting = greeting or "Hello"
    return greeting .. ", " .. name .. "!"
end
"""

SOURCES = [
    ("example_1.lua", EXAMPLE_1),
    ("subfolder/example_3.lua", EXAMPLE_3),
]


@pytest.fixture
def sources():
    return list(SOURCES)


@pytest.fixture
def model():
    return build_from_sources(SOURCES, workers=1).model


@pytest.fixture
def lua_tree(tmp_path) -> Path:
    """Source root laid out like a small Lua project."""
    root = tmp_path / "lua"
    for rel, text in SOURCES:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    (root / "README.md").write_text("-- @desc not a lua file\nfunction nope()\n")
    return root
