"""
Adds or removes liquidity in a pool, deploying the pool first when it does not exist.

    brownie run lend main add 100 2000 --network goerli
    brownie run lend main remove 50 2000 --network goerli
    brownie run lend main update_interest --network goerli

Reads `COLLATERAL_TOKEN`, `QUOTE_TOKEN` and either `LENDER_KEY` or `LENDER_KEYSTORE`
(with `LENDER_PASSWORD`) from the environment or a `.env` file.
"""
import os

from brownie import accounts
from dotenv import load_dotenv

from ajna_sdk import AjnaSDK, Config, SdkError, from_wad, index_to_price, to_wad
from ajna_sdk.constants import MAX_FENWICK_INDEX
from ajna_sdk.pricing import is_valid_price


def load_lender():
    if os.environ.get("LENDER_KEY"):
        return accounts.add(os.environ["LENDER_KEY"])
    return accounts.load(
        os.environ["LENDER_KEYSTORE"], password=os.environ.get("LENDER_PASSWORD")
    )


def get_pool(ajna, lender, collateral, quote):
    try:
        pool = ajna.factory.get_pool(collateral, quote)
        print("Using pool with address", pool.address)
    except SdkError:
        ajna.factory.deploy_pool(lender, collateral, quote, to_wad("0.05")).verify_and_submit()
        pool = ajna.factory.get_pool(collateral, quote)
        print("Deployed pool to", pool.address)
    return pool


def add_liquidity(pool, lender, amount, price):
    if not is_valid_price(price):
        raise SdkError("Please provide a valid price")

    bucket = pool.get_bucket_by_price(price)
    pool.quote_approve(lender, amount).verify_and_submit()
    bucket.add_quote_token(lender, amount).verify_and_submit()
    print("Added", from_wad(amount), "liquidity to bucket", bucket.index)


def remove_liquidity(pool, lender, amount, price):
    bucket = pool.get_bucket_by_price(price)
    bucket.remove_quote_token(lender, amount).verify_and_submit()
    print("Removed liquidity from bucket", bucket.index)


def update_interest(pool, lender):
    pool.update_interest(lender).verify_and_submit()
    print("Borrow rate", from_wad(pool.get_stats().borrow_rate), "after updating")


def main(action="", deposit="100", price=None):
    load_dotenv()
    lender = load_lender()
    ajna = AjnaSDK(Config.from_environment())

    pool = get_pool(
        ajna, lender, os.environ["COLLATERAL_TOKEN"], os.environ["QUOTE_TOKEN"]
    )
    stats = pool.get_stats()
    prices = pool.get_prices()
    print("Pool has", from_wad(stats.pool_size), "liquidity and", from_wad(stats.debt), "debt")
    print("Borrow rate", from_wad(stats.borrow_rate))

    pool_price = 0
    pool_price_index = max(prices.lup_index, prices.hpb_index)
    if 0 < pool_price_index < MAX_FENWICK_INDEX:
        pool_price = index_to_price(pool_price_index)
        print("Pool price", from_wad(pool_price))

    amount = to_wad(deposit)
    price = to_wad(price) if price is not None else pool_price

    if action == "add":
        add_liquidity(pool, lender, amount, price)
    elif action == "remove":
        remove_liquidity(pool, lender, amount, price)
    elif action == "update_interest":
        update_interest(pool, lender)
