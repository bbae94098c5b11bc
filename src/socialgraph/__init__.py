"""socialgraph: users, friendships, and hobbies as one consistent graph."""

__version__ = "0.1.0"
