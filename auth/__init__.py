"""auth/ -- Credential hashing, token signing, user storage, and the auth service.

Layer rule: auth/ imports only stdlib + third-party libraries (and core/
for configuration types). It does NOT import from api/.
api/ imports from auth/, not the other way around.
"""
