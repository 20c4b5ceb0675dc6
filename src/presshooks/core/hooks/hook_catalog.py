"""Core hook catalog.

Hooks the host application dispatches out of the box. Names follow the
pattern ``<layer>.<entity>.<operation>:<kind>:<phase>``:

- ``svc.*`` hooks fire in the service layer,
- ``rest.*`` hooks fire in the REST layer around requests and on failures,
- ``plugin.*`` and ``server:*`` hooks mark lifecycle events.

IMPORTANT: Adding hooks is non-breaking. Renaming or removing a hook,
           or changing its kind or argument count, breaks plugins.
"""

from presshooks.core.hooks.hook_registry import HookKind, HookRegistry, HookSpec


class CoreHook:
    """Core hook names.

    Attributes in format: <LAYER>_<ENTITY>_<OPERATION>_<PHASE>
    """

    # Users
    SVC_USER_CREATE_BEFORE = "svc.user.create:action:before"
    SVC_USER_CREATE_AFTER = "svc.user.create:action:after"
    SVC_USER_CREATE_RESULT = "svc.user.create:filter:result"
    SVC_USER_GET_BEFORE = "svc.user.get:action:before"
    SVC_USER_GET_AFTER = "svc.user.get:action:after"
    SVC_USER_GET_RESULT = "svc.user.get:filter:result"
    SVC_USERS_GET_BEFORE = "svc.users.get:action:before"
    SVC_USERS_GET_AFTER = "svc.users.get:action:after"
    SVC_USERS_GET_RESULT = "svc.users.get:filter:result"
    SVC_USER_UPDATE_INPUT = "svc.user.update:filter:input"
    SVC_USER_UPDATE_BEFORE = "svc.user.update:action:before"
    SVC_USER_UPDATE_AFTER = "svc.user.update:action:after"
    SVC_USER_UPDATE_RESULT = "svc.user.update:filter:result"
    SVC_USER_DELETE_BEFORE = "svc.user.delete:action:before"
    SVC_USER_DELETE_AFTER = "svc.user.delete:action:after"
    SVC_USER_DELETE_RESULT = "svc.user.delete:filter:result"
    SVC_USER_LOGIN_BEFORE = "svc.user.login:action:before"
    SVC_USER_LOGIN_AFTER = "svc.user.login:action:after"
    SVC_USER_LOGIN_RESULT = "svc.user.login:filter:result"
    SVC_USER_LOGIN_ERROR = "svc.user.login:action:error"
    SVC_USER_CAN_BEFORE = "svc.user.can:action:before"
    SVC_USER_CAN_AFTER = "svc.user.can:action:after"
    SVC_USER_CAN_RESULT = "svc.user.can:filter:result"

    # User meta
    SVC_USER_META_CREATE_BEFORE = "svc.userMeta.create:action:before"
    SVC_USER_META_CREATE_AFTER = "svc.userMeta.create:action:after"
    SVC_USER_META_GET_BEFORE = "svc.userMeta.get:action:before"
    SVC_USER_META_GET_AFTER = "svc.userMeta.get:action:after"
    SVC_USER_META_GET_RESULT = "svc.userMeta.get:filter:result"
    SVC_USER_META_GET_BATCH_RESULT = "svc.userMeta.getBatch:filter:result"
    SVC_USER_META_SET_BEFORE = "svc.userMeta.set:action:before"
    SVC_USER_META_SET_INPUT = "svc.userMeta.set:filter:input"
    SVC_USER_META_SET_AFTER = "svc.userMeta.set:action:after"
    SVC_USER_META_DELETE_BEFORE = "svc.userMeta.delete:action:before"
    SVC_USER_META_DELETE_AFTER = "svc.userMeta.delete:action:after"
    SVC_USER_META_DELETE_RESULT = "svc.userMeta.delete:filter:result"
    SVC_USER_META_SET_ROLE_BEFORE = "svc.userMeta.setRole:action:before"
    SVC_USER_META_SET_ROLE_AFTER = "svc.userMeta.setRole:action:after"
    SVC_USER_META_BATCH_UPDATE_BEFORE = "svc.userMeta.batchUpdate:action:before"
    SVC_USER_META_BATCH_UPDATE_AFTER = "svc.userMeta.batchUpdate:action:after"
    SVC_USER_META_BATCH_UPDATE_INPUT = "svc.userMeta.batchUpdate:filter:input"

    # Tokens
    SVC_JWT_SIGN_BEFORE = "svc.jwt.sign:action:before"
    SVC_JWT_SIGN_AFTER = "svc.jwt.sign:action:after"
    SVC_JWT_VERIFY_BEFORE = "svc.jwt.verify:action:before"
    SVC_JWT_VERIFY_AFTER = "svc.jwt.verify:action:after"

    # Posts
    SVC_POST_CREATE_BEFORE = "svc.post.create:action:before"
    SVC_POST_CREATE_AFTER = "svc.post.create:action:after"
    SVC_POST_CREATE_RESULT = "svc.post.create:filter:result"
    SVC_POST_GET_BEFORE = "svc.post.get:action:before"
    SVC_POST_GET_AFTER = "svc.post.get:action:after"
    SVC_POST_GET_RESULT = "svc.post.get:filter:result"
    SVC_POST_UPDATE_INPUT = "svc.post.update:filter:input"
    SVC_POST_UPDATE_BEFORE = "svc.post.update:action:before"
    SVC_POST_UPDATE_AFTER = "svc.post.update:action:after"
    SVC_POST_UPDATE_RESULT = "svc.post.update:filter:result"
    SVC_POST_DELETE_BEFORE = "svc.post.delete:action:before"
    SVC_POST_DELETE_AFTER = "svc.post.delete:action:after"
    SVC_POST_DELETE_RESULT = "svc.post.delete:filter:result"
    SVC_POSTS_GET_BEFORE = "svc.posts.get:action:before"
    SVC_POSTS_GET_AFTER = "svc.posts.get:action:after"
    SVC_POSTS_GET_RESULT = "svc.posts.get:filter:result"

    # Post meta
    SVC_POST_META_CREATE_BEFORE = "svc.postMeta.create:action:before"
    SVC_POST_META_CREATE_AFTER = "svc.postMeta.create:action:after"
    SVC_POST_META_GET_BEFORE = "svc.postMeta.get:action:before"
    SVC_POST_META_GET_AFTER = "svc.postMeta.get:action:after"
    SVC_POST_META_GET_RESULT = "svc.postMeta.get:filter:result"
    SVC_POST_META_GET_BATCH_BEFORE = "svc.postMeta.getBatch:action:before"
    SVC_POST_META_GET_BATCH_AFTER = "svc.postMeta.getBatch:action:after"
    SVC_POST_META_GET_BATCH_RESULT = "svc.postMeta.getBatch:filter:result"
    SVC_POST_META_SET_INPUT = "svc.postMeta.set:filter:input"
    SVC_POST_META_SET_BEFORE = "svc.postMeta.set:action:before"
    SVC_POST_META_SET_AFTER = "svc.postMeta.set:action:after"
    SVC_POST_META_DELETE_BEFORE = "svc.postMeta.delete:action:before"
    SVC_POST_META_DELETE_AFTER = "svc.postMeta.delete:action:after"
    SVC_POST_META_DELETE_RESULT = "svc.postMeta.delete:filter:result"

    # REST
    REST_USERS_GET_ERROR = "rest.users.get:action:error"
    REST_USERS_CREATE_ERROR = "rest.users.create:action:error"
    REST_USERS_CREATE_AFTER = "rest.users.create:action:after"
    REST_USER_UPDATE_ERROR = "rest.user.update:action:error"
    REST_USER_LOGIN_ERROR = "rest.user.login:action:error"
    REST_POSTS_GET_ERROR = "rest.posts.get:action:error"
    REST_POSTS_SINGLE_ERROR = "rest.posts.single:action:error"
    REST_POSTS_CREATE_ERROR = "rest.posts.create:action:error"
    REST_POSTS_UPDATE_ERROR = "rest.posts.update:action:error"
    REST_POSTS_DELETE_ERROR = "rest.posts.delete:action:error"

    # Lifecycle
    PLUGIN_ENABLED = "plugin.enabled"
    PLUGIN_DISABLED = "plugin.disabled"
    PLUGIN_MOUNT_REST = "plugin.mount:rest"
    SERVER_STARTING = "server:starting"
    SERVER_STARTED = "server:started"


_A = HookKind.ACTION.value
_F = HookKind.FILTER.value


def _spec(kind: str, accepted_args: int, description: str) -> dict[str, object]:
    return {"kind": kind, "accepted_args": accepted_args, "description": description}


CORE_HOOKS: dict[str, dict[str, object]] = {
    # Users
    CoreHook.SVC_USER_CREATE_BEFORE: _spec(_A, 1, "Before a user is created"),
    CoreHook.SVC_USER_CREATE_AFTER: _spec(_A, 1, "After a user is created"),
    CoreHook.SVC_USER_CREATE_RESULT: _spec(_F, 1, "Filter the created user"),
    CoreHook.SVC_USER_GET_BEFORE: _spec(_A, 1, "Before fetching a user by login or email"),
    CoreHook.SVC_USER_GET_AFTER: _spec(_A, 1, "After fetching a user by login or email"),
    CoreHook.SVC_USER_GET_RESULT: _spec(_F, 1, "Filter the fetched user"),
    CoreHook.SVC_USERS_GET_BEFORE: _spec(_A, 1, "Before fetching users"),
    CoreHook.SVC_USERS_GET_AFTER: _spec(_A, 1, "After fetching users"),
    CoreHook.SVC_USERS_GET_RESULT: _spec(_F, 1, "Filter the fetched user list"),
    CoreHook.SVC_USER_UPDATE_INPUT: _spec(_F, 2, "Filter the update payload (payload, user id)"),
    CoreHook.SVC_USER_UPDATE_BEFORE: _spec(_A, 1, "Before updating a user"),
    CoreHook.SVC_USER_UPDATE_AFTER: _spec(_A, 1, "After updating a user"),
    CoreHook.SVC_USER_UPDATE_RESULT: _spec(_F, 1, "Filter the updated user"),
    CoreHook.SVC_USER_DELETE_BEFORE: _spec(_A, 1, "Before deleting a user"),
    CoreHook.SVC_USER_DELETE_AFTER: _spec(_A, 1, "After deleting a user"),
    CoreHook.SVC_USER_DELETE_RESULT: _spec(_F, 1, "Filter the deleted user"),
    CoreHook.SVC_USER_LOGIN_BEFORE: _spec(_A, 1, "Before user login"),
    CoreHook.SVC_USER_LOGIN_AFTER: _spec(_A, 1, "After user login"),
    CoreHook.SVC_USER_LOGIN_RESULT: _spec(_F, 1, "Filter the login result"),
    CoreHook.SVC_USER_LOGIN_ERROR: _spec(_A, 1, "On user login failure"),
    CoreHook.SVC_USER_CAN_BEFORE: _spec(_A, 1, "Before checking user capabilities"),
    CoreHook.SVC_USER_CAN_AFTER: _spec(_A, 1, "After checking user capabilities"),
    CoreHook.SVC_USER_CAN_RESULT: _spec(_F, 1, "Filter the capability check result"),
    # User meta
    CoreHook.SVC_USER_META_CREATE_BEFORE: _spec(_A, 1, "Before creating user meta defaults"),
    CoreHook.SVC_USER_META_CREATE_AFTER: _spec(_A, 1, "After creating user meta defaults"),
    CoreHook.SVC_USER_META_GET_BEFORE: _spec(_A, 1, "Before getting user meta"),
    CoreHook.SVC_USER_META_GET_AFTER: _spec(_A, 1, "After getting user meta"),
    CoreHook.SVC_USER_META_GET_RESULT: _spec(_F, 3, "Filter a user meta value (value, user id, key)"),
    CoreHook.SVC_USER_META_GET_BATCH_RESULT: _spec(_F, 3, "Filter a user meta batch (map, user id, keys)"),
    CoreHook.SVC_USER_META_SET_BEFORE: _spec(_A, 1, "Before setting user meta"),
    CoreHook.SVC_USER_META_SET_INPUT: _spec(_F, 3, "Filter a user meta value before it is stored"),
    CoreHook.SVC_USER_META_SET_AFTER: _spec(_A, 1, "After setting user meta"),
    CoreHook.SVC_USER_META_DELETE_BEFORE: _spec(_A, 1, "Before deleting user meta"),
    CoreHook.SVC_USER_META_DELETE_AFTER: _spec(_A, 1, "After deleting user meta"),
    CoreHook.SVC_USER_META_DELETE_RESULT: _spec(_F, 1, "Filter the user meta delete result"),
    CoreHook.SVC_USER_META_SET_ROLE_BEFORE: _spec(_A, 1, "Before setting a user role"),
    CoreHook.SVC_USER_META_SET_ROLE_AFTER: _spec(_A, 1, "After setting a user role"),
    CoreHook.SVC_USER_META_BATCH_UPDATE_BEFORE: _spec(_A, 1, "Before updating user meta in bulk"),
    CoreHook.SVC_USER_META_BATCH_UPDATE_AFTER: _spec(_A, 1, "After updating user meta in bulk"),
    CoreHook.SVC_USER_META_BATCH_UPDATE_INPUT: _spec(_F, 3, "Filter a user meta value before a bulk update"),
    # Tokens
    CoreHook.SVC_JWT_SIGN_BEFORE: _spec(_A, 1, "Before signing a token"),
    CoreHook.SVC_JWT_SIGN_AFTER: _spec(_A, 2, "After a token is signed (payload, token)"),
    CoreHook.SVC_JWT_VERIFY_BEFORE: _spec(_A, 1, "Before verifying a token"),
    CoreHook.SVC_JWT_VERIFY_AFTER: _spec(_A, 2, "After a token is verified (token, payload)"),
    # Posts
    CoreHook.SVC_POST_CREATE_BEFORE: _spec(_A, 1, "Before creating a post"),
    CoreHook.SVC_POST_CREATE_AFTER: _spec(_A, 1, "After creating a post"),
    CoreHook.SVC_POST_CREATE_RESULT: _spec(_F, 1, "Filter the created post"),
    CoreHook.SVC_POST_GET_BEFORE: _spec(_A, 1, "Before getting a post"),
    CoreHook.SVC_POST_GET_AFTER: _spec(_A, 1, "After getting a post"),
    CoreHook.SVC_POST_GET_RESULT: _spec(_F, 1, "Filter the fetched post"),
    CoreHook.SVC_POST_UPDATE_INPUT: _spec(_F, 2, "Filter the update payload (payload, post id)"),
    CoreHook.SVC_POST_UPDATE_BEFORE: _spec(_A, 1, "Before updating a post"),
    CoreHook.SVC_POST_UPDATE_AFTER: _spec(_A, 1, "After updating a post"),
    CoreHook.SVC_POST_UPDATE_RESULT: _spec(_F, 1, "Filter the updated post"),
    CoreHook.SVC_POST_DELETE_BEFORE: _spec(_A, 1, "Before deleting a post"),
    CoreHook.SVC_POST_DELETE_AFTER: _spec(_A, 1, "After deleting a post"),
    CoreHook.SVC_POST_DELETE_RESULT: _spec(_F, 1, "Filter the deleted post"),
    CoreHook.SVC_POSTS_GET_BEFORE: _spec(_A, 1, "Before getting multiple posts"),
    CoreHook.SVC_POSTS_GET_AFTER: _spec(_A, 1, "After getting multiple posts"),
    CoreHook.SVC_POSTS_GET_RESULT: _spec(_F, 1, "Filter the fetched post list"),
    # Post meta
    CoreHook.SVC_POST_META_CREATE_BEFORE: _spec(_A, 1, "Before creating default post meta"),
    CoreHook.SVC_POST_META_CREATE_AFTER: _spec(_A, 1, "After creating default post meta"),
    CoreHook.SVC_POST_META_GET_BEFORE: _spec(_A, 1, "Before getting a post meta value"),
    CoreHook.SVC_POST_META_GET_AFTER: _spec(_A, 1, "After getting a post meta value"),
    CoreHook.SVC_POST_META_GET_RESULT: _spec(_F, 3, "Filter a post meta value (value, post id, key)"),
    CoreHook.SVC_POST_META_GET_BATCH_BEFORE: _spec(_A, 1, "Before getting a post meta batch"),
    CoreHook.SVC_POST_META_GET_BATCH_AFTER: _spec(_A, 1, "After getting a post meta batch"),
    CoreHook.SVC_POST_META_GET_BATCH_RESULT: _spec(_F, 3, "Filter a post meta batch (map, post id, keys)"),
    CoreHook.SVC_POST_META_SET_INPUT: _spec(_F, 3, "Filter a post meta value before it is stored"),
    CoreHook.SVC_POST_META_SET_BEFORE: _spec(_A, 1, "Before setting post meta"),
    CoreHook.SVC_POST_META_SET_AFTER: _spec(_A, 1, "After setting post meta"),
    CoreHook.SVC_POST_META_DELETE_BEFORE: _spec(_A, 1, "Before deleting post meta"),
    CoreHook.SVC_POST_META_DELETE_AFTER: _spec(_A, 1, "After deleting post meta"),
    CoreHook.SVC_POST_META_DELETE_RESULT: _spec(_F, 1, "Filter the post meta delete result"),
    # REST
    CoreHook.REST_USERS_GET_ERROR: _spec(_A, 1, "On users get failure"),
    CoreHook.REST_USERS_CREATE_ERROR: _spec(_A, 1, "On users create failure"),
    CoreHook.REST_USERS_CREATE_AFTER: _spec(_A, 1, "After users create"),
    CoreHook.REST_USER_UPDATE_ERROR: _spec(_A, 1, "On user update failure"),
    CoreHook.REST_USER_LOGIN_ERROR: _spec(_A, 1, "On user login failure"),
    CoreHook.REST_POSTS_GET_ERROR: _spec(_A, 1, "On posts get failure"),
    CoreHook.REST_POSTS_SINGLE_ERROR: _spec(_A, 1, "On single post get failure"),
    CoreHook.REST_POSTS_CREATE_ERROR: _spec(_A, 1, "On posts create failure"),
    CoreHook.REST_POSTS_UPDATE_ERROR: _spec(_A, 1, "On posts update failure"),
    CoreHook.REST_POSTS_DELETE_ERROR: _spec(_A, 1, "On posts delete failure"),
    # Lifecycle
    CoreHook.PLUGIN_ENABLED: _spec(_A, 1, "After a plugin is enabled"),
    CoreHook.PLUGIN_DISABLED: _spec(_A, 1, "After a plugin is disabled"),
    CoreHook.PLUGIN_MOUNT_REST: _spec(_A, 1, "After a plugin REST router is mounted"),
    CoreHook.SERVER_STARTING: _spec(_A, 0, "Before the server starts"),
    CoreHook.SERVER_STARTED: _spec(_A, 1, "After the server starts"),
}


def declare_core_hooks(registry: HookRegistry) -> list[HookSpec]:
    """Declare every core hook in the registry. Call once at boot."""
    return registry.declare_hooks(CORE_HOOKS)


def get_all_core_hooks() -> list[str]:
    """Get all core hook names."""
    return [
        value
        for name, value in vars(CoreHook).items()
        if not name.startswith("_") and isinstance(value, str)
    ]
