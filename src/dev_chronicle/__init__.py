"""dev-chronicle: a weekly newspaper of your GitHub and Zenn activity."""

__version__ = "0.1.0"
