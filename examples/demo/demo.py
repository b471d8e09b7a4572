"""
Dent Demo (Python)

Demonstrates the full lifecycle:
1. Parse a buffer and navigate it with borrowed nodes
2. Expand @merge at parse time
3. Register an extension function
4. Parse a file that imports other files
5. Release the document and show that borrowed nodes are invalidated

Run: pip install -e . && python examples/demo/demo.py
"""

from pathlib import Path

from dent import Dent, ReleasedHandleError, UnknownFunctionError
from dent import accessors as api

DENT_DIR = Path(__file__).resolve().parent.parent / "dent"

print("=== Dent Demo ===\n")

# 1. Parse and navigate
doc = api.parse("{ name: Mario skills: [ jumps grows ] age: 35 alive: true }")
root = doc.root
print("1. Parsed a character sheet")
print(f"   name:      {api.as_str(api.get(root, 'name'))}")
print(f"   skills[1]: {api.as_str(api.get_index(api.get(root, 'skills'), 1))}")
print(f"   age:       {api.as_int(api.get(root, 'age'))}")
print(f"   alive:     {api.as_bool(api.get(root, 'alive'))}")
print(f"   missing:   {api.get(root, 'height')}\n")

# 2. Merge
merged = api.parse("@merge [ [ 1 2 ] [ 3 4 ] ]")
total = sum(api.as_int(api.get_index(merged.root, i)) for i in range(api.length(merged.root)))
print("2. @merge [ [ 1 2 ] [ 3 4 ] ]")
print(f"   Result: {api.to_str(merged.root)}  Sum: {total}\n")
api.free(merged)

# 3. Extension function
dent = Dent()
dent.add_function("sum", lambda args, ctx: sum(args[0]))
with dent.parse("{ total: @sum [ 1 2 3 ] }") as summed:
    print("3. Registered @sum")
    print(f"   Result: {summed.to_str()}\n")

try:
    dent.parse("@frobnicate 1 2")
except UnknownFunctionError as exc:
    print(f"   Unregistered function rejected: {exc}\n")

# 4. Imports
with dent.parse_file(DENT_DIR / "party.dent") as party:
    print("4. Parsed party.dent (imports dict.dent and parts/*)")
    for character in party.root["characters"]:
        print(f"   {character['name'].as_str()}: {character['skills'].to_str()}")
    print(f"   settings: {party.root['settings'].to_str()}\n")

# 5. Release
name = root["name"]
api.free(doc)
print("5. Released the first document")
try:
    name.as_str()
except ReleasedHandleError as exc:
    print(f"   Borrowed node now raises: {exc}")

print("\n=== Done ===")
