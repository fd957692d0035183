"""
Starts a distribution period when none is active, then creates a funding proposal or
reports on an existing one.

    brownie run submit_proposal main --network goerli
    brownie run submit_proposal main "ajna community courses 5" --network goerli
"""
import os

from brownie import accounts
from dotenv import load_dotenv

from ajna_sdk import AjnaSDK, Config, SdkError, from_wad

# sample proposal on goerli
EXISTING_PROPOSAL_ID = 0x22BF669502C9C2673093A4EF1DEDE6C878E1157EB773C221B87DB4FED622256E


def start_distribution_period(ajna, caller):
    tx = ajna.grant_fund.start_new_distribution_period(caller)
    print(tx.verify(), "estimated gas required for startNewDistributionPeriod")
    print(tx.verify_and_submit().txid)


def propose(ajna, caller, title):
    # titles must be unique within the grant fund
    tx = ajna.grant_fund.create_proposal(
        caller,
        title,
        [(os.environ["VOTER_ADDRESS"], "1000.00")],
        external_link="https://example.com",
    )
    print(tx.verify(), "estimated gas required for proposeStandard")
    receipt = tx.verify_and_submit()
    proposal_id = receipt.events["ProposalCreated"]["proposalId"]
    print("proposal created with id", hex(proposal_id))
    return proposal_id


def main(title=None):
    load_dotenv()
    caller = accounts.load(os.environ["VOTER_KEYSTORE"])
    ajna = AjnaSDK(Config.from_environment())

    try:
        period = ajna.grant_fund.get_active_distribution_period()
        print("current distribution period details:", period)
    except SdkError as e:
        print(f"{e}, starting a new one")
        start_distribution_period(ajna, caller)

    proposal_id = propose(ajna, caller, title) if title else EXISTING_PROPOSAL_ID
    proposal = ajna.grant_fund.get_proposal(proposal_id)
    info = proposal.get_info()
    print(
        f"the proposal has received {from_wad(info.votes_received)} votes and "
        f"{from_wad(info.funding_votes_received)} funding votes, "
        f"with {from_wad(info.tokens_requested)} tokens requested"
    )
    print(f"the proposal is in {proposal.get_state().name} state")
