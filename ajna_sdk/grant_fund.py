import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence, Tuple

from .config import Config
from .contracts import create_transaction, get_block_number, load_contract
from .exceptions import SdkError
from .numeric import Numeric, to_wad
from .transaction import Transaction


class ProposalState(IntEnum):
    PENDING = 0
    ACTIVE = 1
    CANCELED = 2
    DEFEATED = 3
    SUCCEEDED = 4
    QUEUED = 5
    EXPIRED = 6
    EXECUTED = 7


@dataclass(frozen=True)
class DistributionPeriod:
    id: int
    start_block: int
    end_block: int
    funds_available: int
    funding_vote_power_cast: int
    funded_slate_hash: bytes


@dataclass(frozen=True)
class ProposalInfo:
    proposal_id: int
    distribution_id: int
    votes_received: int
    tokens_requested: int
    funding_votes_received: int
    executed: bool


class Proposal:
    def __init__(self, contract, proposal_id: int) -> None:
        self.contract = contract
        self.id = proposal_id

    def __repr__(self) -> str:
        return f"<Proposal {self.id:#x}>"

    def get_info(self) -> ProposalInfo:
        (
            proposal_id,
            distribution_id,
            votes_received,
            tokens_requested,
            funding_votes_received,
            executed,
        ) = self.contract.getProposalInfo(self.id)

        return ProposalInfo(
            proposal_id,
            distribution_id,
            votes_received,
            tokens_requested,
            funding_votes_received,
            executed,
        )

    def get_state(self) -> ProposalState:
        return ProposalState(self.contract.state(self.id))


class GrantFund:
    """
    Distribution periods and standard funding proposals of the Ajna grant fund.

    Proposals request AJNA tokens from the treasury; each recipient becomes one
    `transfer` call executed by the fund when the proposal succeeds.
    """

    def __init__(self, config: Config, contract_loader=load_contract, web3=None) -> None:
        self.contract = contract_loader("GrantFund", config.grant_fund)
        self.ajna_token = contract_loader("ERC20", config.ajna_token)
        self._web3 = web3

    def start_new_distribution_period(self, signer) -> Transaction:
        return create_transaction(
            self.contract, signer, "startNewDistributionPeriod", web3=self._web3
        )

    def get_active_distribution_period(self) -> DistributionPeriod:
        """
        Raises:
            SdkError: no distribution period was started, or the latest one has ended
        """
        distribution_id = self.contract.getDistributionId()
        if distribution_id == 0:
            raise SdkError("There is no active distribution period")

        period = DistributionPeriod(
            *self.contract.getDistributionPeriodInfo(distribution_id)
        )
        if get_block_number(self._web3) > period.end_block:
            raise SdkError("There is no active distribution period")

        return period

    def create_proposal(
        self,
        signer,
        title: str,
        recipients: Sequence[Tuple[str, Numeric]],
        external_link: str = "",
    ) -> Transaction:
        """
        Creates a transaction submitting a standard funding proposal.

        Args:
            signer: proposer account
            title: proposal title, must be unique within the grant fund
            recipients: `(address, amount)` pairs, amounts in AJNA such as `"1000.00"`
            external_link: link to a description of the proposal
        """
        if not recipients:
            raise SdkError("A proposal needs at least one recipient")

        targets = [self.ajna_token.address] * len(recipients)
        values = [0] * len(recipients)
        calldatas = [
            self.ajna_token.transfer.encode_input(address, to_wad(amount))
            for address, amount in recipients
        ]
        description = json.dumps({"title": title, "externalLink": external_link})

        return create_transaction(
            self.contract,
            signer,
            "proposeStandard",
            (targets, values, calldatas, description),
            web3=self._web3,
        )

    def get_proposal(self, proposal_id: int) -> Proposal:
        return Proposal(self.contract, proposal_id)
