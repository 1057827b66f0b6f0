# Routes package init
"""
MindEase Backend — API Routes Package
=======================================

Route Inventory:
    - auth.py:         POST /auth/register, POST /auth/login
    - chats.py:        GET /chats/{userId}, POST /chats
    - discussions.py:  /discussions (posts, likes, replies)
    - profile.py:      GET /profile/{id}, PUT /profile, POST /profile/upload
    - uploads.py:      GET /uploads/{path}
    - health.py:       GET /health

Routes stay thin: extract inputs, call one service method, return its model.
"""
