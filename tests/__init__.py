"""
Tests package for the qrshare backend.

This package contains test suites organized by type:
- unit/: Domain, application, infrastructure and API tests with in-memory stores
- contracts/: Contract tests for the record store and object store interfaces
- integration/: Tests against SQLite, a local blob directory and the full app
- property/: Hypothesis property tests for links, policies and signatures
"""
