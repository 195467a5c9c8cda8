"""Thread safe: convert 1000 docs in parallel with one Converter."""

from concurrent.futures import ThreadPoolExecutor

from mdconvert import Converter

to_typst = Converter(output="typst", tables=False)
docs = ["# Doc " + str(i) + "\n\nContent for document " + str(i) for i in range(1000)]

with ThreadPoolExecutor(max_workers=8) as ex:
    results = list(ex.map(to_typst, docs))

print(f"Converted {len(results)} documents in parallel")
print("First doc:", repr(results[0]))
