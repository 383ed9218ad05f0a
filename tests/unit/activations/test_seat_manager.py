"""
Unit tests for SeatManager domain service.
"""

from unittest.mock import Mock

import pytest

from accounts.ports.user_repository import UserRepository
from activations.domain.services import SeatManager
from core.domain.exceptions import SeatLimitExceededError


class TestSeatManager:
    """Tests for SeatManager service."""

    def test_counts_active_users_by_default(self, sample_activation):
        """Test only active users occupy a seat by default."""
        repository = Mock(spec=UserRepository)
        repository.count_by_activation.return_value = 2

        seats = SeatManager(repository)

        assert seats.count_used_seats(sample_activation.id) == 2
        repository.count_by_activation.assert_called_once_with(
            sample_activation.id, active_only=True
        )

    def test_counts_disabled_users_when_configured(self, sample_activation):
        """Test disabled users keep their seat when configured."""
        repository = Mock(spec=UserRepository)
        repository.count_by_activation.return_value = 3

        SeatManager(repository, count_disabled_users=True).count_used_seats(sample_activation.id)

        repository.count_by_activation.assert_called_once_with(
            sample_activation.id, active_only=False
        )

    def test_seats_remaining(self, sample_activation):
        """Test remaining seats."""
        repository = Mock(spec=UserRepository)
        repository.count_by_activation.return_value = 1

        assert SeatManager(repository).seats_remaining(sample_activation) == 2

    def test_seat_available(self, sample_activation):
        """Test a seat is available below the limit."""
        repository = Mock(spec=UserRepository)
        repository.count_by_activation.return_value = 2

        SeatManager(repository).ensure_seat_available(sample_activation)

    def test_seat_limit_reached(self, sample_activation):
        """Test limit reached raises."""
        repository = Mock(spec=UserRepository)
        repository.count_by_activation.return_value = 3

        with pytest.raises(SeatLimitExceededError, match=r"User limit reached \(3\)"):
            SeatManager(repository).ensure_seat_available(sample_activation)

    def test_within_limit_after_insert(self, sample_activation):
        """Test the post-insert check allows exactly max_users."""
        repository = Mock(spec=UserRepository)
        repository.count_by_activation.return_value = 3

        SeatManager(repository).ensure_within_limit(sample_activation)

        repository.count_by_activation.return_value = 4
        with pytest.raises(SeatLimitExceededError):
            SeatManager(repository).ensure_within_limit(sample_activation)
