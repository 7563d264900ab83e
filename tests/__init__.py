# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Media Signer API:
# - test_signatures.py: Fixed vectors and properties of both signing algorithms
# - test_delivery_url.py: URL parsing and canonicalization
# - test_url_builder.py: public_id extraction and URL assembly
# - test_signing_service.py: The full signing pipeline
# - test_config.py: Settings and the CloudinaryConfig snapshot
# - test_api.py: HTTP endpoints, auth and error envelope
#
# Run tests with: pytest
# =============================================================================
