# Import every model so Base.metadata knows all tables before create_all
from memories.db.models.user import User
from memories.db.models.post import Post, PostTag
from memories.db.models.like import Like
from memories.db.models.comment import Comment
