"""Response composer implementation."""

import random
from typing import Dict, List, Optional

from ...config.models import Config
from ...utils import fill_template

DEFAULT_TEMPLATES: Dict[str, List[str]] = {
    "found_movie": [
        "One of my favorites–surely you mean the {0} classic {1}! To fill you in: {2}",
        "The best {0} had to offer, I'd say! If you meant {1}, that is! Here's the overview: {2}",
        "Of course, {1}! This {0} movie's about: {2}",
    ],
    "added_to_queue": ["...added it to the queue!"],
    "force_added": ["Not sure if I've heard of it, but added '{0}' to the queue!"],
    "lookup_not_found": [
        "Try as I might, I couldn't find '{0}.' Are you sure you spelled it right?",
    ],
    "add_not_found": [
        "Try as I might, I couldn't find a movie called '{0}.' Are you sure you spelled it "
        'right? If that is the name of the movie, say "force add" to force add the query '
        "text instead.",
    ],
    "removed": [
        "I really wish you all would take the time to see it, but I removed _{0}_ from the "
        "movie queue.",
    ],
    "remove_not_found": [
        "There isn't a movie called '{0}' in the queue. Did you spell it right?",
    ],
    "queue_empty": ["The queue is currently empty, but feel free to add to it!"],
    "queue_summary_one": ["Sure thing! There is currently 1 movie in the queue:"],
    "queue_summary_many": ["Sure thing! There are currently {0} movies in the queue:"],
    "queue_item": ["_{0}_ requested by {1}"],
    "lookup_failed": [
        "Sorry, I couldn't complete that lookup right now. Give it another try in a bit!",
    ],
    "queue_write_failed": [
        "Something went wrong saving the movie queue, so I left it as it was. "
        "Please try again in a bit!",
    ],
}


class ResponseComposer:
    """Renders reply text from randomly chosen phrasings."""

    def __init__(self, config: Config, rng: Optional[random.Random] = None) -> None:
        """Initialize composer.

        Args:
            config: Application configuration; its ``responses`` section
                replaces the phrasings of the keys it names.
            rng: Random source used to pick phrasings. Pass a seeded
                ``random.Random`` for reproducible output.
        """
        self._templates: Dict[str, List[str]] = {**DEFAULT_TEMPLATES, **config.responses}
        self._rng = rng or random.Random()

    @property
    def keys(self) -> List[str]:
        """Known template keys."""
        return sorted(self._templates)

    def phrasings(self, key: str) -> List[str]:
        """Get every phrasing for a template key.

        Raises:
            KeyError: If the key is unknown.
        """
        return list(self._templates[key])

    def render(self, key: str, *args: str) -> str:
        """Render a reply.

        Args:
            key: Template key.
            *args: Values for the ``{0}``, ``{1}``, ... placeholders.

        Returns:
            Rendered reply text.

        Raises:
            KeyError: If the key is unknown.
        """
        template = self._rng.choice(self._templates[key])
        return fill_template(template, *args)
