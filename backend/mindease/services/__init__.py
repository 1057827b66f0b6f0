# Services package init
"""
MindEase Backend — Services Layer
===================================

What:  Business logic between routes (HTTP) and the DataStore (persistence).
How:   Stateless singletons; the store is passed in on every call.

Service Inventory:
    - AggregationService: fan-out author enrichment, friend summary, likes
    - AccountService: register, login
    - ChatService: list/append private chat messages
    - DiscussionService: class/department/public posts, likes, replies
    - ProfileService: profile view, update, avatar upload
    - FileService: upload validation, storage, cleanup
"""
