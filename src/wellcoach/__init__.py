"""WellCoach: wellness coaching API."""
