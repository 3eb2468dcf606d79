"""Tests for romdex.

Test Files and Coverage:
========================

| Test File         | Test Classes     | Tested Constructs        | Tested Functionalities                        |
|-------------------|------------------|--------------------------|-----------------------------------------------|
| test_settings.py  | SettingsTest     | Settings                 | File lookup order, dotted keys                |
| test_cli.py       | RomdexMainTest   | romdex_main()            | scan retries and exclusions, identify, query, |
|                   |                  |                          | lookup, inspect, error exits                  |

Subpackages database/, metadata/, scan/ and utils/ mirror the source layout.
"""
