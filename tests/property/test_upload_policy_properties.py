"""
Property tests for the upload policy.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from qrshare.domain.errors import ValidationError, ValidationReason
from qrshare.domain.image_links.value_objects import MAX_UPLOAD_BYTES, UploadPolicy

from tests.property.strategies import allowed_mime_types, rejected_mime_types

policy = UploadPolicy()


@given(mime=allowed_mime_types(), size=st.integers(min_value=0, max_value=MAX_UPLOAD_BYTES))
def test_sizes_up_to_limit_accepted(mime, size):
    assert policy.validate(mime, size) == mime


@given(mime=allowed_mime_types(), excess=st.integers(min_value=1, max_value=10 * MAX_UPLOAD_BYTES))
def test_sizes_over_limit_rejected(mime, excess):
    with pytest.raises(ValidationError) as exc_info:
        policy.validate(mime, MAX_UPLOAD_BYTES + excess)

    assert exc_info.value.reason == ValidationReason.TOO_LARGE


@given(mime=rejected_mime_types(), size=st.integers(min_value=0, max_value=10 * MAX_UPLOAD_BYTES))
def test_type_checked_before_size(mime, size):
    with pytest.raises(ValidationError) as exc_info:
        policy.validate(mime, size)

    assert exc_info.value.reason == ValidationReason.UNSUPPORTED_TYPE


@given(mime=allowed_mime_types(), params=st.sampled_from(["", "; charset=binary", ";q=1"]))
def test_mime_normalized(mime, params):
    assert policy.validate(mime.upper() + params, 1) == mime
