"""
                Table Ordering Backend

Restaurant table ordering with realtime kitchen and table updates.
Menu browsing, order placement and status tracking over HTTP,
live pushes over websockets.

Author: Khalil_Bannouri
Version: 4.0.0
License: MIT
"""

__version__ = "4.0.0"
__author__ = "Khalil_Bannouri"
