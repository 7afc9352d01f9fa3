MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500
MAX_MEDIA_URI_LENGTH = 256

admin = Variable(t=str)
mint_capacity = Variable()
last_token_id = Variable()

owners = Hash()
stories = Hash()


@construct
def seed(capacity: int = 1000):
    assert isinstance(capacity, int) and not isinstance(capacity, bool) and capacity >= 0, \
        'Capacity must be a non-negative integer.'

    admin.set(ctx.caller)
    mint_capacity.set(capacity)
    last_token_id.set(0)


def check_field(field, value, max_length):
    if not isinstance(value, str) or len(value) == 0 or len(value) > max_length:
        raise InvalidMetadata(field=field, max_length=max_length)


def is_minted(token_id):
    # Anything that is not a positive int up to the last id was never minted
    if not isinstance(token_id, int) or isinstance(token_id, bool):
        return False
    return 0 < token_id <= last_token_id.get()


@export
def mint(title: str, description: str, media_uri: str):
    check_field('title', title, MAX_TITLE_LENGTH)
    check_field('description', description, MAX_DESCRIPTION_LENGTH)
    check_field('media_uri', media_uri, MAX_MEDIA_URI_LENGTH)

    minted = last_token_id.get()
    if minted >= mint_capacity.get():
        raise MintLimitReached(capacity=mint_capacity.get())

    token_id = minted + 1

    stories[token_id] = {
        'title': title,
        'description': description,
        'media_uri': media_uri,
        'creator': ctx.caller
    }
    owners[token_id] = ctx.caller
    last_token_id.set(token_id)

    return token_id


@export
def transfer(token_id: int, sender: str, recipient: str):
    if ctx.caller != sender:
        raise Unauthorized(caller=ctx.caller, action='transfer token {}'.format(token_id))

    if not is_minted(token_id):
        raise TokenDoesNotExist(token_id=token_id)

    if owners[token_id] != sender:
        raise NotTokenOwner(sender=sender, token_id=token_id)

    if sender == recipient:
        raise SelfTransfer(sender=sender, token_id=token_id)

    assert isinstance(recipient, str) and len(recipient) > 0, 'Recipient must be an identity.'

    owners[token_id] = recipient


@export
def set_admin(new_admin: str):
    if ctx.caller != admin.get():
        raise Unauthorized(caller=ctx.caller, action='set the admin')

    admin.set(new_admin)


@export
def get_owner(token_id: int):
    if not is_minted(token_id):
        return None
    return owners[token_id]


@export
def get_metadata(token_id: int):
    if not is_minted(token_id):
        return None
    return stories[token_id]


@export
def get_media_uri(token_id: int):
    if not is_minted(token_id):
        raise NotFound(token_id=token_id)
    return stories[token_id]['media_uri']


@export
def get_total_minted():
    return last_token_id.get()


@export
def get_admin():
    return admin.get()


@export
def get_mint_capacity():
    return mint_capacity.get()
