# Import all models here so Alembic and create_all can detect them
from memoria.db.session import Base

from memoria.modules.user_management.models.user import User
from memoria.modules.auth.models.pending_registration import PendingRegistration
from memoria.modules.relationships.models.follow import Follow
from memoria.modules.relationships.models.block import Block
from memoria.modules.friendships.models.friendship import Friendship
from memoria.modules.notifications.models.notification import Notification
