"""Store a parsed document as Pandoc JSON and read it back."""

from mdconvert import parse
from mdconvert.serialization import from_json, to_json

doc = parse("# Cached document\n\nThis tree can be serialized and restored.")

json_str = to_json(doc, indent=2)
restored = from_json(json_str)

print("Original == restored:", doc == restored)
print("JSON length:", len(json_str), "chars")
