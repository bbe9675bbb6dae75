TRANSLATIONS: dict[str, dict[str, str]] = {
    "es": {
        "status.PENDING": "Pendiente",
        "status.CONFIRMED": "Confirmada",
        "status.CANCELLED": "Cancelada",
        "status.COMPLETED": "Completada",
        "status.IN_PROGRESS": "En curso",
        "booking.notFound": "Reserva no encontrada",
        "profile.notFound": "Perfil no encontrado",
        "cancel.refundable": "Su reserva será cancelada y recibirá un reembolso completo de {amount}€",
        "cancel.nonRefundable": "Su reserva será cancelada. El anticipo de {amount}€ no será reembolsado (cancelación con menos de {hours}h de antelación)",
        "cancel.confirmQuestion": "¿Confirmar cancelación?",
        "cancel.confirmationRequired": "Debe confirmar la cancelación",
        "cancel.notAllowed": "Esta reserva ya no se puede cancelar",
        "modify.notAllowed": "Esta reserva ya no se puede modificar",
        "modify.invalidRange": "La fecha de fin debe ser posterior a la de inicio",
        "modify.noChanges": "No hay cambios que guardar",
        "extend.notAllowed": "Esta reserva no se puede prolongar",
        "extend.notForward": "La nueva fecha de fin debe ser posterior a la actual",
        "extend.agencyUnavailable": "El pago en agencia no está disponible para esta prolongación",
        "extend.payment.card": "Se realizará un cargo de {amount}€ en su tarjeta ahora.",
        "extend.payment.agency": "El importe de {amount}€ será cobrado en agencia al devolver el vehículo.",
        "extend.success.card": "El pago de {amount}€ ha sido procesado correctamente.",
        "extend.success.agency": "El importe de {amount}€ será cobrado en agencia al devolver el vehículo.",
        "login.invalidEmail": "Introduce un email válido",
        "login.invalidCode": "El código debe tener 6 dígitos",
        "profile.saved": "Perfil actualizado",
        "profile.activeBookings": "No puede solicitar la eliminación de sus datos mientras tenga reservas activas",
        "profile.retentionWarning": "Sus datos se conservarán hasta",
    },
    "en": {
        "status.PENDING": "Pending",
        "status.CONFIRMED": "Confirmed",
        "status.CANCELLED": "Cancelled",
        "status.COMPLETED": "Completed",
        "status.IN_PROGRESS": "In progress",
        "booking.notFound": "Booking not found",
        "profile.notFound": "Profile not found",
        "cancel.refundable": "Your booking will be cancelled and you will receive a full refund of €{amount}",
        "cancel.nonRefundable": "Your booking will be cancelled. The €{amount} deposit will not be refunded (cancellation less than {hours}h in advance)",
        "cancel.confirmQuestion": "Confirm cancellation?",
        "cancel.confirmationRequired": "You must confirm the cancellation",
        "cancel.notAllowed": "This booking can no longer be cancelled",
        "modify.notAllowed": "This booking can no longer be modified",
        "modify.invalidRange": "The end date must be after the start date",
        "modify.noChanges": "There are no changes to save",
        "extend.notAllowed": "This booking cannot be extended",
        "extend.notForward": "The new end date must be after the current one",
        "extend.agencyUnavailable": "Paying at the agency is not available for this extension",
        "extend.payment.card": "Your card will be charged €{amount} now.",
        "extend.payment.agency": "The amount of €{amount} will be charged at the agency when returning the vehicle.",
        "extend.success.card": "Your payment of €{amount} has been processed.",
        "extend.success.agency": "The amount of €{amount} will be charged at the agency when returning the vehicle.",
        "login.invalidEmail": "Enter a valid email",
        "login.invalidCode": "The code must have 6 digits",
        "profile.saved": "Profile updated",
        "profile.activeBookings": "You cannot request data deletion while you have active bookings",
        "profile.retentionWarning": "Your data will be kept until",
    },
    "fr": {
        "status.PENDING": "En attente",
        "status.CONFIRMED": "Confirmée",
        "status.CANCELLED": "Annulée",
        "status.COMPLETED": "Terminée",
        "status.IN_PROGRESS": "En cours",
        "booking.notFound": "Réservation introuvable",
        "profile.notFound": "Profil introuvable",
        "cancel.refundable": "Votre réservation sera annulée et vous serez remboursé de {amount}€",
        "cancel.nonRefundable": "Votre réservation sera annulée. L'acompte de {amount}€ ne sera pas remboursé (annulation moins de {hours}h à l'avance)",
        "cancel.confirmQuestion": "Confirmer l'annulation ?",
        "cancel.notAllowed": "Cette réservation ne peut plus être annulée",
        "modify.notAllowed": "Cette réservation ne peut plus être modifiée",
        "extend.notAllowed": "Cette réservation ne peut pas être prolongée",
        "extend.notForward": "La nouvelle date de fin doit être postérieure à l'actuelle",
        "extend.payment.card": "Votre carte sera débitée de {amount}€ maintenant.",
        "extend.payment.agency": "Le montant de {amount}€ sera réglé en agence au retour du véhicule.",
        "extend.success.card": "Votre paiement de {amount}€ a bien été effectué.",
        "extend.success.agency": "Le montant de {amount}€ sera réglé en agence au retour du véhicule.",
        "login.invalidCode": "Le code doit contenir 6 chiffres",
        "profile.saved": "Profil mis à jour",
    },
}
