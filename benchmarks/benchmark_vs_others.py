"""Benchmark mdconvert parsing against mistune and markdown-it-py.

All three libraries build a tree (mistune's AST renderer, markdown-it-py's
token stream), so the numbers compare like with like. Writing LaTeX and Typst
is timed separately since the other libraries have no such writers.

Run with:
    python benchmarks/benchmark_vs_others.py
"""

import sys
import time
from collections.abc import Callable

SECTION = """
# Section {i}

This is paragraph {i} with **bold**, *italic*, ~~struck~~ and `code`.

- List item 1
- List item 2
  - nested [link](https://example.com/{i})

1. First
2. Second

```python
def function_{i}():
    return {i}
```

| Column A | Column B |
|:---------|---------:|
| Cell {i} | Data {i} |

> This is a blockquote in section {i}.
> It has multiple lines.

See [the reference][ref{i}].

[ref{i}]: https://example.com/ref/{i} "Reference {i}"

---
"""


def make_corpus(sections: int = 100) -> list[str]:
    """Documents of growing size built from one representative section."""
    return ["".join(SECTION.format(i=i) for i in range(n)) for n in range(1, sections + 1, 10)]


def time_it(parse: Callable[[str], object], docs: list[str], iterations: int) -> float:
    # Warmup
    for doc in docs[:3]:
        parse(doc)

    start = time.perf_counter()
    for _ in range(iterations):
        for doc in docs:
            parse(doc)
    return (time.perf_counter() - start) / iterations


def mdconvert_parser() -> Callable[[str], object]:
    from mdconvert import Converter

    return Converter().parse


def mistune_parser() -> Callable[[str], object] | None:
    try:
        import mistune
    except ImportError:
        print("mistune not installed. Run: pip install mistune")
        return None
    return mistune.create_markdown(renderer=None, plugins=["strikethrough", "table"])


def markdown_it_parser() -> Callable[[str], object] | None:
    try:
        from markdown_it import MarkdownIt
    except ImportError:
        print("markdown-it-py not installed. Run: pip install markdown-it-py")
        return None
    return MarkdownIt("commonmark").enable(["table", "strikethrough"]).parse


def main() -> None:
    from mdconvert import convert

    docs = make_corpus()
    iterations = 10
    total_kb = sum(len(doc) for doc in docs) / 1024
    print(f"Corpus: {len(docs)} documents, {total_kb:.0f} KB")
    print(f"Python {sys.version.split()[0]}\n")

    results: list[tuple[str, float]] = []
    for name, factory in (
        ("mdconvert", mdconvert_parser),
        ("mistune", mistune_parser),
        ("markdown-it-py", markdown_it_parser),
    ):
        parser = factory()
        if parser is None:
            continue
        print(f"Benchmarking {name}...")
        results.append((name, time_it(parser, docs, iterations)))

    print("\n" + "=" * 60)
    print("RESULTS: parse to tree (single thread)")
    print("=" * 60)
    results.sort(key=lambda item: item[1])
    baseline = results[0][1]
    for name, elapsed in results:
        ratio = elapsed / baseline if baseline > 0 else 0
        print(f"{name:20} {elapsed * 1000:8.2f}ms  ({ratio:.2f}x)")

    print("\n" + "=" * 60)
    print("RESULTS: mdconvert writers (parse + write)")
    print("=" * 60)
    for target in ("json", "latex", "typst"):
        elapsed = time_it(lambda doc, target=target: convert(doc, to=target), docs, iterations)
        print(f"{target:20} {elapsed * 1000:8.2f}ms")


if __name__ == "__main__":
    main()
