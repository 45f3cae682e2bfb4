# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Business Operations API:
# - fakes.py: In-memory stand-in for the Supabase client
# - conftest.py: Fixtures (fake store, test client, users and tokens)
# - test_*.py: Endpoint and service tests, one module per area
#
# Run tests with: pytest
# =============================================================================
