from .change_feed import Change, ChangeEvent, ChangeFeed, Subscription

__all__ = ["Change", "ChangeEvent", "ChangeFeed", "Subscription"]
