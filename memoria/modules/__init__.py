"""
Modules package initialization.
This package contains all the functional modules of the application.
"""

from memoria.modules import auth
from memoria.modules import user_management
from memoria.modules import relationships
from memoria.modules import friendships
from memoria.modules import notifications
from memoria.modules import realtime
