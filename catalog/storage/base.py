# Abstract persistence sink: every storage backend takes the final bundle of a run

import abc

from catalog.models import ScrapeBundle


class BaseStorage(abc.ABC):
    """Base class for storage backends.

    Implementations must not raise on write errors: they log the problem and
    return False, so a failed save never aborts a completed scrape.
    """

    @property
    @abc.abstractmethod
    def location(self) -> str:
        """Human readable description of where data is written."""

    @abc.abstractmethod
    def save(self, bundle: ScrapeBundle) -> bool:
        """Persist a run's statistics and products.

        Returns:
            True if the bundle was written, False otherwise
        """
        raise NotImplementedError("Concrete storage classes must implement save() method")
