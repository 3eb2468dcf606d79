"""Tests for the scan module.

Test Files and Coverage:
========================

| Test File           | Test Classes          | Tested Constructs               | Tested Functionalities                      |
|---------------------|-----------------------|---------------------------------|---------------------------------------------|
| test_identifier.py  | FingerprintTest       | fingerprint_of(), identify()    | Known checksums, empty input                |
| test_archive.py     | ForEachMemberTest     | for_each_member()               | Member metadata, early stop, bad archives   |
| test_session.py     | ScanSessionTest       | ScanHandle.advance(), skip()    | Progress, retry on read failure, finishing, |
|                     |                       |                                 | corrupt archive members                     |
|                     | ScanCreateTest        | ScanHandle.create()             | Extension filter, excluded names            |
| test_playlist.py    | WritePlaylistTest     | write_playlist()                | Block layout, labels from the database      |
"""
