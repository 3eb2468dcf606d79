"""Tests for the metadata module.

Test Files and Coverage:
========================

| Test File        | Test Classes                  | Tested Constructs                    | Tested Functionalities                   |
|------------------|-------------------------------|--------------------------------------|------------------------------------------|
| test_decoder.py  | DecodeRecordTest, HexTest     | decode_record(), bin_to_hex()        | Field table, defaults, last write wins   |
| test_record.py   | MetadataRecordTest            | MetadataRecord                       | Absent values, sentinel view, clear      |
| test_listing.py  | BuildMetadataListTest         | build_metadata_list()                | Counting, queries, failure rollback      |
|                  | MetadataListTest              | MetadataList                         | Release, lookup by CRC32 or fingerprint  |
"""
