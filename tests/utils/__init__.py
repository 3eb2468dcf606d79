"""Tests for utility modules.

Test Files and Coverage:
========================

| Test File           | Test Classes          | Tested Constructs               | Tested Functionalities                      |
|---------------------|-----------------------|---------------------------------|---------------------------------------------|
| test_walker.py      | ListEntriesTest       | list_entries()                  | Ordering, extension filter, exclusions      |
|                     | NormalizeExtensionsTest | normalize_extensions()        | Pipe strings, dots, case                    |
| test_messages.py    | MessageQueueTest      | MessageQueue                    | Transient posts, priority, lifetimes        |
"""
