"""Tests for the database module.

Test Files and Coverage:
========================

| Test File        | Test Classes                  | Tested Constructs                    | Tested Functionalities                   |
|------------------|-------------------------------|--------------------------------------|------------------------------------------|
| test_keys.py     | VarintTest, IndexKeyTest      | encode_varint(), index_prefix()      | Key ordering, bounds, truncation         |
| test_query.py    | QueryCompileTest              | compile_query()                      | Syntax errors, offsets, non-ASCII digits |
|                  | QueryMatchTest                | Query.matches()                      | Literals, glob, between, or/and, nesting |
| test_store.py    | DatabaseStoreTest, CursorTest | DatabaseStore, Cursor                | Open errors, ordering, END, find_entry   |
"""
