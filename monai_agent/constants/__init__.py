from monai_agent.constants.tokens import TOKEN, find_token

__all__ = ["TOKEN", "find_token"]
