from sanic import Sanic
from sanic.response import json, text
from nftregistry.client import RegistryClient
from nftregistry.exceptions import RegistryError, RuntimeFault, Unminted, ContractNotFound
from nftregistry.logger import get_logger
from nftregistry import config

log = get_logger('Webserver')

app = Sanic('nftregistry')

client = RegistryClient()


def error_response(e):
    if isinstance(e, (Unminted, ContractNotFound)):
        status = 404
    else:
        status = 400

    if isinstance(e, RegistryError):
        return json({'error': e.kind}, status=status)

    return json({'error': str(e)}, status=status)


def call(contract, function, **kwargs):
    """
    Runs a read against the registry without committing anything. Whatever the read touched is
    restored afterwards, and writes already pending on the client are left as they were.
    """
    snapshot = client.raw_driver.snapshot()

    try:
        output = client.executor.execute(sender=config.NULL_ACCOUNT,
                                         contract_name=contract,
                                         function_name=function,
                                         kwargs=kwargs)
    finally:
        client.raw_driver.restore(snapshot)

    if output['status_code'] == 1:
        raise output['result']

    return output['result']


def token_id_arg(token_id):
    try:
        return int(token_id)
    except ValueError:
        raise Unminted()


@app.route("/", methods=["GET", ])
async def index(request):
    return text("I\'m a teapot", status=418)


# Returns {'contracts': JSON List of strings}
@app.route('/contracts', methods=['GET'])
async def get_contracts(request):
    contracts = client.get_contracts()
    return json({'contracts': contracts})


@app.route('/contracts/<contract>', methods=['GET'])
async def get_contract(request, contract):
    code = client.raw_driver.get_contract(contract)

    if code is None:
        return json({'error': '{} does not exist'.format(contract)}, status=404)

    return json({
        'name': contract,
        'code': code,
        'owner': client.raw_driver.get_owner(contract),
        'submitted': client.raw_driver.get_time_submitted(contract)
    }, status=200)


@app.route('/contracts/<contract>/methods', methods=['GET'])
async def get_methods(request, contract):
    try:
        methods = client.get_methods(contract)
    except ContractNotFound:
        return json({'error': '{} does not exist'.format(contract)}, status=404)

    return json({'methods': methods}, status=200)


@app.route('/contracts/<contract>/balances/<account>', methods=['GET'])
async def get_balance(request, contract, account):
    try:
        balance = call(contract, 'balance_of', account=account)
    except (RegistryError, RuntimeFault) as e:
        return error_response(e)

    return json({'account': account, 'balance': balance}, status=200)


@app.route('/contracts/<contract>/owners/<token_id>', methods=['GET'])
async def get_owner(request, contract, token_id):
    try:
        owner = call(contract, 'owner_of', token_id=token_id_arg(token_id))
    except (RegistryError, RuntimeFault) as e:
        return error_response(e)

    return json({'token_id': int(token_id), 'owner': owner}, status=200)


@app.route('/contracts/<contract>/approvals/<token_id>', methods=['GET'])
async def get_approved(request, contract, token_id):
    try:
        approved = call(contract, 'get_approved', token_id=token_id_arg(token_id))
    except (RegistryError, RuntimeFault) as e:
        return error_response(e)

    return json({'token_id': int(token_id), 'approved': approved}, status=200)


@app.route('/contracts/<contract>/interfaces/<discriminator>', methods=['GET'])
async def supports_interface(request, contract, discriminator):
    try:
        supported = call(contract, 'supports_interface', discriminator=discriminator)
    except (RegistryError, RuntimeFault) as e:
        return error_response(e)

    return json({'interface': discriminator, 'supported': supported}, status=200)


@app.route('/contracts/<contract>/events', methods=['GET'])
async def get_events(request, contract):
    if client.raw_driver.get_contract(contract) is None:
        return json({'error': '{} does not exist'.format(contract)}, status=404)

    name = request.args.get('event')

    events = []
    for e in client.events:
        if e['contract'] != contract:
            continue
        if name is not None and e['event'] != name:
            continue

        events.append({
            'event': e['event'],
            'data': {k: v.hex() if isinstance(v, bytes) else v for k, v in e['data'].items()},
            'indexed': e['indexed']
        })

    return json({'events': events}, status=200)


def start_webserver():
    log.info('Starting registry webserver on port {}'.format(config.WEB_SERVER_PORT))
    app.run(host=config.WEB_SERVER_HOST, port=config.WEB_SERVER_PORT, workers=config.NUM_WORKERS,
            debug=False, access_log=False)


if __name__ == '__main__':
    start_webserver()
