"""Convert Markdown in 3 lines: zero config, zero deps."""

from mdconvert import convert

source = "# Hello **World**\n\n- one\n- two"

print(convert(source, to="latex"))
print(convert(source, to="typst"))
