from src.shared.database.base_mapper import BaseEntityMapper
from src.app.core.domain.models import Client, Address, Account, Sex
from src.app.infrastructure.entities.client_entity import ClientEntity, AddressEntity, AccountEntity, ClientSex


class ClientMapper(BaseEntityMapper[Client, ClientEntity]):
    """Mapper for converting between the Client aggregate and its entity graph."""

    @staticmethod
    def to_entity(model_instance: Client) -> ClientEntity:
        """Convert a Client (domain model) to ClientEntity with owned address and accounts."""
        address = model_instance.address
        return ClientEntity(
            id=model_instance.id,
            email=str(model_instance.email),
            first_name=model_instance.first_name,
            last_name=model_instance.last_name,
            personal_id=model_instance.personal_id,
            profile_photo=model_instance.profile_photo,
            mobile_number=model_instance.mobile_number,
            sex=ClientSex(model_instance.sex.value),
            address=AddressEntity(
                id=address.id,
                client_id=model_instance.id,
                country=address.country,
                city=address.city,
                street=address.street,
                zip_code=address.zip_code,
            ),
            accounts=[
                AccountEntity(
                    id=account.id,
                    client_id=model_instance.id,
                    account_number=account.account_number,
                    account_type=account.account_type,
                    balance=account.balance,
                )
                for account in model_instance.accounts
            ],
        )

    @staticmethod
    def to_model(entity: ClientEntity) -> Client:
        """Convert a ClientEntity (database entity) to Client (domain model)."""
        return Client(
            id=entity.id,
            email=entity.email,
            first_name=entity.first_name,
            last_name=entity.last_name,
            personal_id=entity.personal_id,
            profile_photo=entity.profile_photo,
            mobile_number=entity.mobile_number,
            sex=Sex(entity.sex.value),
            address=Address(
                id=entity.address.id,
                country=entity.address.country,
                city=entity.address.city,
                street=entity.address.street,
                zip_code=entity.address.zip_code,
            ),
            accounts=[
                Account(
                    id=account.id,
                    account_number=account.account_number,
                    account_type=account.account_type,
                    balance=account.balance,
                )
                for account in entity.accounts
            ],
        )
