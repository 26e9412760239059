"""
Dashboard API Backend
Flask API server behind the CryptoMind portfolio dashboard
"""

import argparse
import logging
from typing import Dict, Optional

from flask import Flask, Response, jsonify, request, stream_with_context
from flask_cors import CORS

from .ai_advisor import AIAdvisor, prepare_chat_history
from .coingecko import CoinGeckoClient
from .config import Config, load_config, save_config
from .errors import AIUnavailableError, InvalidRequestError
from .etherscan import EtherscanClient
from .models import WalletState
from .portfolio import generate_chart_data, relevant_recommendations, summarize_portfolio
from .transactions import get_labeled_transactions
from .wallet import WalletLoader, get_chain_info, is_valid_address

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)  # Dashboard front end is served from a different origin

STREAM_HEADERS = {
    'Cache-Control': 'no-cache',
    'X-Content-Type-Options': 'nosniff',
}

SETTINGS_KEYS = ('etherscan_api_key', 'gemini_api_key', 'gemini_model',
                 'chain_id', 'transaction_limit', 'ai_label_limit')

# Shared clients, built lazily from config (the price client owns the cache)
_config: Optional[Config] = None
_price_client: Optional[CoinGeckoClient] = None
_etherscan_client: Optional[EtherscanClient] = None
_advisor: Optional[AIAdvisor] = None


def get_config() -> Config:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_price_client() -> CoinGeckoClient:
    global _price_client
    if _price_client is None:
        _price_client = CoinGeckoClient()
    return _price_client


def get_etherscan_client() -> EtherscanClient:
    global _etherscan_client
    if _etherscan_client is None:
        config = get_config()
        _etherscan_client = EtherscanClient(api_key=config.etherscan_api_key,
                                            chain_id=config.chain_id)
    return _etherscan_client


def get_advisor() -> AIAdvisor:
    global _advisor
    if _advisor is None:
        config = get_config()
        _advisor = AIAdvisor(api_key=config.gemini_api_key, model_name=config.gemini_model)
    return _advisor


def reset_services():
    """Drop cached config and clients so the next request rebuilds them"""
    global _config, _etherscan_client, _advisor
    _config = None
    _etherscan_client = None
    _advisor = None


def json_body() -> Dict:
    """Request JSON as a dict; anything other than an object counts as empty"""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def error_response(message: str, status: int):
    return jsonify({'error': message}), status


def text_stream(chunks) -> Response:
    return Response(stream_with_context(chunks),
                    content_type='text/plain; charset=utf-8',
                    headers=STREAM_HEADERS)


@app.route('/api/ai-summary', methods=['POST'])
def ai_summary():
    """Stream a plain-English summary of the posted wallet data"""
    try:
        body = json_body()
        wallet_data = body.get('walletData')
        if not wallet_data or not isinstance(wallet_data, dict):
            return error_response('No wallet data provided', 400)

        wallet = WalletState.from_dict(wallet_data)
        chunks = get_advisor().stream_portfolio_summary(wallet)
        return text_stream(chunks)

    except AIUnavailableError as e:
        return error_response(str(e), 503)
    except Exception as e:
        logger.error(f"[AI Summary] Error: {e}")
        return error_response(str(e) or 'Internal server error', 500)


@app.route('/api/ai-chat', methods=['POST'])
def ai_chat():
    """Stream a chat assistant reply, personalised with the wallet context"""
    try:
        body = json_body()
        messages = body.get('messages')
        if not messages or not isinstance(messages, list):
            return error_response('Messages array is required', 400)

        history = prepare_chat_history(messages)
        if not history:
            return error_response('Messages array is required', 400)

        wallet_context = body.get('walletContext')
        wallet = WalletState.from_dict(wallet_context) if isinstance(wallet_context, dict) else None

        chunks = get_advisor().stream_chat_response(history, wallet)
        return text_stream(chunks)

    except AIUnavailableError as e:
        return error_response(str(e), 503)
    except Exception as e:
        logger.error(f"[AI Chat] Error: {e}")
        return error_response(str(e) or 'Internal server error', 500)


@app.route('/api/transactions', methods=['POST'])
def transactions():
    """Recent transactions of an address, typed and labelled"""
    try:
        body = json_body()
        config = get_config()
        labeled = get_labeled_transactions(
            body.get('address'),
            get_etherscan_client(),
            get_advisor(),
            limit=config.transaction_limit,
            ai_label_limit=config.ai_label_limit,
        )
        return jsonify({'transactions': [tx.to_dict() for tx in labeled]})

    except InvalidRequestError as e:
        return error_response(str(e), 400)
    except Exception as e:
        logger.error(f"[Transactions API] Error: {e}")
        return error_response(str(e) or 'Internal server error', 500)


@app.route('/api/portfolio/<address>')
def portfolio(address: str):
    """Wallet balances, totals, chart segments and matching DeFi opportunities"""
    try:
        loader = WalletLoader(get_etherscan_client(), get_price_client())
        state = loader.load_wallet_state(address)
        tokens = state.tokens

        return jsonify({
            'wallet': state.to_dict(),
            'summary': summarize_portfolio(tokens).to_dict(),
            'chartData': [point.to_dict() for point in generate_chart_data(tokens)],
            'recommendations': [rec.to_dict() for rec in relevant_recommendations(tokens)],
        })

    except InvalidRequestError as e:
        return error_response(str(e), 400)
    except Exception as e:
        logger.error(f"[Portfolio API] Error: {e}")
        return error_response(str(e) or 'Internal server error', 500)


@app.route('/api/prices')
def prices():
    """USD prices for ?ids=bitcoin,ethereum"""
    ids = [i.strip() for i in request.args.get('ids', '').split(',') if i.strip()]
    if not ids:
        return error_response('ids query parameter is required', 400)
    result = get_price_client().get_prices_by_ids(ids)
    return jsonify({coin_id: price.to_dict() for coin_id, price in result.items()})


@app.route('/api/search')
def search():
    query = request.args.get('q', '').strip()
    if not query:
        return error_response('q query parameter is required', 400)
    return jsonify({'coins': get_price_client().search_token(query)})


@app.route('/api/history/<coin_id>')
def history(coin_id: str):
    days = request.args.get('days', 7, type=int)
    if days is None or days <= 0:
        return error_response('Invalid number of days', 400)
    return jsonify({'prices': get_price_client().get_historical_prices(coin_id, days)})


@app.route('/api/chain/<int:chain_id>')
def chain(chain_id: int):
    return jsonify(get_chain_info(chain_id))


@app.route('/api/validate/<address>')
def validate(address: str):
    return jsonify({'address': address, 'valid': is_valid_address(address)})


@app.route('/api/settings', methods=['GET', 'POST'])
def settings():
    """Read (secrets masked) or update the JSON configuration"""
    if request.method == 'GET':
        return jsonify(get_config().to_dict(mask_secrets=True))

    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return error_response('JSON object required', 400)

    updates: Dict = {k: v for k, v in body.items() if k in SETTINGS_KEYS}
    unknown = sorted(set(body) - set(SETTINGS_KEYS))
    if unknown:
        return error_response(f"Unknown settings: {', '.join(unknown)}", 400)

    try:
        config = save_config(updates)
    except OSError as e:
        logger.error(f"Error saving config: {e}")
        return error_response(f"Error saving config: {e}", 500)

    reset_services()
    return jsonify({'message': 'Configuration saved successfully!',
                    'settings': config.to_dict(mask_secrets=True)})


@app.route('/api/health')
def health():
    return jsonify({'status': 'ok', 'ai_available': get_advisor().available})


def main(argv=None):
    parser = argparse.ArgumentParser(description='CryptoMind dashboard API server')
    parser.add_argument('--host', default='127.0.0.1')
    parser.add_argument('--port', type=int, default=5000)
    parser.add_argument('--debug', action='store_true')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    print("Starting CryptoMind Dashboard API...")
    print(f"API will be available at: http://{args.host}:{args.port}")
    print("Press Ctrl+C to stop the server")

    app.run(debug=args.debug, host=args.host, port=args.port)


if __name__ == '__main__':
    main()
