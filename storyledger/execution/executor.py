from functools import partial
import traceback

from storyledger.execution import runtime
from storyledger.execution.module import load_contract
from storyledger.db.driver import ContractDriver
from storyledger.db.contract import Contract
from storyledger.exceptions import LedgerError, Unauthorized
from storyledger.logger import get_logger
from storyledger import config

log = get_logger('Ledger.Executor')


class Executor:
    """
    Runs contract calls one at a time against a single ContractDriver.

    Every call is all-or-nothing: the pending state of the driver is checkpointed
    before the call and reverted if anything raises. The caller identity is
    installed fresh in the runtime context for each call and cleared afterwards.

    Both ``execute`` and ``submit`` return a result dict::

        {
            'status_code': 0 on success, 1 on failure,
            'result': the return value, or the exception raised,
            'error_code': the numeric code of a LedgerError, otherwise None,
            'writes': the keys written by the call and their new values
        }
    """
    def __init__(self, driver=None, bypass_privates=False):
        self.driver = driver or ContractDriver()

        self.bypass_privates = bypass_privates

        runtime.rt.env.update({'__Driver': self.driver})

    def execute(self, sender, contract_name, function_name, kwargs,
                environment=None,
                auto_commit=True) -> dict:

        if not self.bypass_privates:
            assert not function_name.startswith(config.PRIVATE_METHOD_PREFIX), 'Private method not callable.'

        def call():
            module = load_contract(contract_name, self.driver)
            func = getattr(module, function_name)
            return func(**kwargs)

        return self._run(sender, contract_name, call, environment, auto_commit)

    def submit(self, sender, name, code, owner=None, constructor_args=None,
               environment=None,
               auto_commit=True) -> dict:

        call = partial(Contract(driver=self.driver).submit,
                       name=name,
                       code=code,
                       owner=owner,
                       constructor_args=constructor_args,
                       developer=sender)

        return self._run(sender, name, call, environment, auto_commit)

    def _run(self, sender, contract_name, call, environment, auto_commit):
        runtime.rt.env.update({'__Driver': self.driver})
        runtime.rt.env.update(environment or {})

        checkpoint = self.driver.checkpoint()
        writes = {}

        try:
            runtime.rt.set_up({
                'signer': sender,
                'caller': sender,
                'this': contract_name,
                'owner': self.driver.get_owner(contract_name)
            })

            ctx = runtime.rt.context
            if ctx.owner is not None and ctx.owner != ctx.caller:
                raise Unauthorized(caller=ctx.caller, action='call {}'.format(contract_name))

            result = call()
            status_code = 0

            writes = self.driver.writes_since(checkpoint)

            if auto_commit:
                self.driver.commit()
                log.debug('Committed {} write(s) from {} on {}'.format(len(writes), sender, contract_name))

        except Exception as e:
            result = e
            status_code = 1

            if isinstance(e, LedgerError):
                log.info('{} on {} failed with {}: {}'.format(sender, contract_name, e.code, e))
            else:
                log.error(str(e))
                log.error(traceback.format_exc())

            self.driver.revert(checkpoint)

        except BaseException:
            # Interrupts and exits still propagate, but never with a half applied call
            self.driver.revert(checkpoint)
            raise

        finally:
            runtime.rt.clean_up()

        return {
            'status_code': status_code,
            'result': result,
            'error_code': getattr(result, 'code', None) if status_code == 1 else None,
            'writes': writes,
        }
