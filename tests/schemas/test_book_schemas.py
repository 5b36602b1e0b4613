"""Book and profile input validation.

Invariants:
    - title/author/genre stripped and required
    - rating within 0..5 in half steps
    - dates must be timezone-aware
    - profile tags normalized to a trimmed comma list
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from bookcircle.schemas.book import BookCreate, BookUpdate
from bookcircle.schemas.profile import ProfileCreate
from bookcircle.schemas.wishlist import WishlistItemCreate


def _book(**overrides):
    data = {
        "title": "Dune",
        "author": "Frank Herbert",
        "description": "Spice.",
        "date_started": "2024-01-01T00:00:00Z",
        "date_finished": "2024-01-10T00:00:00Z",
        "genre": "Science Fiction",
        "rating": 4.5,
    }
    data.update(overrides)
    return data


# --- BookCreate -----------------------------------------------------------

def test_book_create_accepts_valid_payload():
    book = BookCreate(**_book(title="  Dune  "))
    assert book.title == "Dune"
    assert book.img_src == ""
    assert book.date_started == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_blank_title_rejected():
    with pytest.raises(ValidationError):
        BookCreate(**_book(title="   "))


def test_title_over_255_chars_rejected():
    with pytest.raises(ValidationError):
        BookCreate(**_book(title="x" * 256))


@pytest.mark.parametrize("rating", [-0.5, 5.5, 3.3])
def test_rating_out_of_range_or_step_rejected(rating):
    with pytest.raises(ValidationError):
        BookCreate(**_book(rating=rating))


@pytest.mark.parametrize("rating", [0, 2.5, 5])
def test_rating_half_steps_accepted(rating):
    assert BookCreate(**_book(rating=rating)).rating == rating


def test_naive_date_rejected():
    with pytest.raises(ValidationError):
        BookCreate(**_book(date_started="2024-01-01T00:00:00"))


def test_book_update_img_src_optional():
    assert BookUpdate(**_book()).img_src is None
    assert BookUpdate(**_book(img_src="https://img/x.png")).img_src == "https://img/x.png"


# --- ProfileCreate --------------------------------------------------------

def test_profile_tags_normalized():
    profile = ProfileCreate(bio="Hi", tags=" scifi , ,history ,")
    assert profile.tags == "scifi,history"


def test_profile_bio_too_long_rejected():
    with pytest.raises(ValidationError):
        ProfileCreate(bio="x" * 256)


# --- WishlistItemCreate ---------------------------------------------------

def test_wishlist_requires_title_and_author():
    with pytest.raises(ValidationError):
        WishlistItemCreate(title="", author="Someone")
