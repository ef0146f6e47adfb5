"""Direct AWS SDK access (boto3) used outside the ``aws`` CLI pass-through."""

from awsu.aws.context import CallerIdentity, extract_username, get_caller_identity

__all__ = ["CallerIdentity", "extract_username", "get_caller_identity"]
