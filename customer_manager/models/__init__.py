from customer_manager.models.customer import Customer
from customer_manager.models.address import Address
