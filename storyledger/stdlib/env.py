from storyledger.stdlib.bridge.orm import exports as orm_exports
from storyledger.stdlib.bridge.access import exports as access_exports
from storyledger.stdlib.bridge.errors import exports as error_exports


def gather():
    env = {}

    env.update(orm_exports)
    env.update(access_exports)
    env.update(error_exports)

    return env
